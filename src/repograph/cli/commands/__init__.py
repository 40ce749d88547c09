"""CLI commands for repograph."""
