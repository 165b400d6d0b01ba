"""Persistent storage for the content graph."""

from .service import StorageService

__all__ = ["StorageService"]
