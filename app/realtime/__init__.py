"""Live booking feed."""
