"""Application settings loading."""

from .app import AppSettings


__all__ = ["AppSettings"]
