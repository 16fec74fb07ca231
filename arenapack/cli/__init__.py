"""Command-line interface for arenapack."""
