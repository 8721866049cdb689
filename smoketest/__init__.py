"""Bootstrapper for end-to-end smoke tests of the editor."""

__version__ = "0.1.0"
