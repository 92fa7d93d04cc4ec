"""Core module for the eventhub application."""

from .types import FirestoreDocument

__all__ = ["FirestoreDocument"]
