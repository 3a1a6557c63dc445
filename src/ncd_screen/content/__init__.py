"""Content module.

This module resolves engine keys to display text.
"""

from ncd_screen.content.catalog import (
    ContentResolver,
    DetailBlock,
    EnglishContentCatalog,
    RecommendationContent,
    default_resolver,
)

__all__ = [
    "ContentResolver",
    "DetailBlock",
    "EnglishContentCatalog",
    "RecommendationContent",
    "default_resolver",
]
