"""Database models for the Bookmaru application."""

from .place import Place

__all__ = ['Place']
