"""Core data model, graph assembly and metrics for repograph."""
