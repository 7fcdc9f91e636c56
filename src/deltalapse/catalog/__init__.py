"""
Catalog Module
==============

Frame discovery and numeric ordering.
"""

from deltalapse.catalog.catalog import (
    DEFAULT_EXTENSION,
    FrameCatalog,
    extract_order_key,
    list_frames,
)

__all__ = [
    "DEFAULT_EXTENSION",
    "FrameCatalog",
    "extract_order_key",
    "list_frames",
]
