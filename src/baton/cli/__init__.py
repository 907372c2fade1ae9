"""Baton command-line front-end."""
