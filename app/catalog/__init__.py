"""Seed data loading for student profiles and the scholarship catalog."""

from .loader import SeedData, SeedDataError, SeedResult, load_seed_file, parse_seed_dict, seed_database

__all__ = [
    "SeedData",
    "SeedResult",
    "SeedDataError",
    "load_seed_file",
    "parse_seed_dict",
    "seed_database",
]
