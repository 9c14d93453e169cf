"""Logging setup and console rendering."""
