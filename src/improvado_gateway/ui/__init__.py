"""HTML rendering for the consent flow."""
