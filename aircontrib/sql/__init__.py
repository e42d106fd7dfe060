"""SQL dialect helpers, statement parsing and the insert activity."""

__all__ = ["activity", "dbhelper", "statement"]