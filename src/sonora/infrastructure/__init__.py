"""Infrastructure layer: HTTP clients, persistence, tagging, artwork, logging."""
