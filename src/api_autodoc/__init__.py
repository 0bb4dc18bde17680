"""Reverse-proxying service that documents API traffic as OpenAPI."""

__version__ = "0.1.0"
