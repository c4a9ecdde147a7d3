"""Functional core - pure business logic with no I/O."""

from .tasks import Task, Priority, DueDate, Duration, sort_by_due, filter_suppressed
from .cache import CacheEntry, Freshness, determine_freshness, is_fresh, merge_suppressed
from .images import Image, STUB_IMAGE

__all__ = [
    # Tasks
    "Task",
    "Priority",
    "DueDate",
    "Duration",
    "sort_by_due",
    "filter_suppressed",
    # Cache
    "CacheEntry",
    "Freshness",
    "determine_freshness",
    "is_fresh",
    "merge_suppressed",
    # Images
    "Image",
    "STUB_IMAGE",
]
