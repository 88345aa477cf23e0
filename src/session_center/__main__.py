"""Allow `python -m session_center`."""

from session_center.cli import cli_main

if __name__ == "__main__":
    cli_main()
