"""Ports - interfaces/protocols for external dependencies."""

from .task_source import TaskSource
from .image_source import ImageSource
from .cache_store import KeyValueStore, Transaction

__all__ = [
    "TaskSource",
    "ImageSource",
    "KeyValueStore",
    "Transaction",
]
