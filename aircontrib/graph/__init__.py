"""Property graph model: data types, definitions, in-memory graphs, builder and manager."""

__all__ = ["builder", "datatype", "helper", "inmemory", "manager", "metadata", "model"]