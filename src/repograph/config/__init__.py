"""Configuration for repograph."""
