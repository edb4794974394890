"""\
Utilities
=========

Author: Akshay Mestry <xa@mes3.dev>
Created on: Saturday, August 02 2025
Last updated on: Tuesday, August 19 2025

This module acts as an entry point for combining various utilities used
throughout the framework.
"""

from __future__ import annotations

from .filesystem import *
from .logging import *


__all__: tuple[str, ...] = tuple(filesystem.__all__)
__all__ += tuple(logging.__all__)
