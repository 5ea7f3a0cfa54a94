"""API routes for the gateway."""
