"""Adapters that plug HTTP transport, hostname matching and output formatting into the core."""
