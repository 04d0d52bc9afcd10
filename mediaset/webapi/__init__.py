"""FastAPI surface for the lookup services."""
