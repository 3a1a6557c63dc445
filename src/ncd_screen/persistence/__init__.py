"""Persistence module.

This module stores and restores patient profiles, sanitizing stored data
against the current profile shape.
"""

from ncd_screen.persistence.json_store import load_profile, save_profile
from ncd_screen.persistence.sanitizer import DEFAULT_PROFILE_DATA, sanitize_stored_profile

__all__ = [
    "DEFAULT_PROFILE_DATA",
    "load_profile",
    "sanitize_stored_profile",
    "save_profile",
]
