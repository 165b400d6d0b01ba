"""Infrastructure layer: persistence for the content graph."""
