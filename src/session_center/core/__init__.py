"""Core logic for hook registration, backups and reset."""
