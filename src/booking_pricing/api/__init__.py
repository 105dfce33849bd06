"""API subpackage - FastAPI adapter over the pricing engine."""
