"""Graph database service interfaces, a ring cache and Dgraph RDF rendering of graph entities."""

__all__ = ["base", "cache", "rdf"]