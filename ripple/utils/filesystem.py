"""\
Filesystem utility objects
==========================

Author: Akshay Mestry <xa@mes3.dev>
Created on: Wednesday, July 30 2025
Last updated on: Tuesday, August 19 2025

This module provides the filesystem helpers used by the file logger.
"""

from __future__ import annotations

import os

__all__: tuple[str, ...] = ("mkdir",)


def mkdir(path: str) -> str:
    """Create a directory if it does not exist and return its path."""
    os.makedirs(path, exist_ok=True)
    return path
