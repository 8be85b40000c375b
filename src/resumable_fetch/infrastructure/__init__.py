"""Infrastructure adapters - logging and HTTP transport."""
