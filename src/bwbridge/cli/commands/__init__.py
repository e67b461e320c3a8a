"""CLI commands for bwbridge."""
