"""Pipeline building blocks: SQL inserts, reading notifications, property graphs and RDF output."""

__version__ = "0.1.0"
__all__ = ["dbservice", "graph", "notification", "rules", "sql"]