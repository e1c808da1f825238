"""AskDB - natural language to SQL for PostgreSQL."""

__version__ = "0.1.0"
