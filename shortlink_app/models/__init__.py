"""
Database models for the shortlink service.
"""

from .url import UrlMapping

__all__ = ["UrlMapping"]
