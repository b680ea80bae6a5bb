"""Streamable HTTP application."""
