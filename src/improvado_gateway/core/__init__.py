"""Core helpers shared across the gateway."""
