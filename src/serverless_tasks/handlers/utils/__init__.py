"""Shared handler utilities: observability, routing, request parsing, responses and errors."""
