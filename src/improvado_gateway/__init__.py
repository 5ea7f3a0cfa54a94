"""Improvado Gateway - API-key consent flow and tool passthrough for Improvado and Notion."""

from ._version import __version__


__all__ = ["__version__"]
