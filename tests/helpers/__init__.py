"""Test helper utilities for Scholarship Matcher tests."""

from .factories import FUTURE_DEADLINE, NOW, make_profile, make_scholarship
from .memory_stores import InMemoryStores, memory_unit_of_work

__all__ = [
    "NOW",
    "FUTURE_DEADLINE",
    "make_profile",
    "make_scholarship",
    "InMemoryStores",
    "memory_unit_of_work",
]
