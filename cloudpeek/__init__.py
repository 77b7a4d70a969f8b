"""Clients, models and table helpers for browsing Google Cloud project resources."""

__version__ = "0.1.0"