"""REST API for rendering templates."""
