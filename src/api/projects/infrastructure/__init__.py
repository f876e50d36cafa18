"""Infrastructure adapters for the projects bounded context."""
