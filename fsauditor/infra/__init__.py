"""Infrastructure layer: database access and document writers."""
