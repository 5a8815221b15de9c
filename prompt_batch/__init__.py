"""Batch submission of prompt files to a text-generation HTTP API."""

__version__ = "0.1.0"
