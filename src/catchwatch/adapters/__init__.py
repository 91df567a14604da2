"""Adapters binding catchwatch ports to HTTP services, files and the database."""
