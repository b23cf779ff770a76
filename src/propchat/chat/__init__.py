"""Request-scoped question answering on top of the query engine."""
