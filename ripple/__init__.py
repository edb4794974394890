"""\
Ripple
======

Author: Akshay Mestry <xa@mes3.dev>
Created on: Monday, August 18 2025
Last updated on: Wednesday, August 20 2025

Reactive attributes for component-style objects.

This package (ripple) lets a class declare named state slots with
default values, computed getters, transforming setters and read-only
locks. Declarations accumulate along the class hierarchy, instances
override them with their own configuration, and every change of a
slot's effective value is published as a `change:<attr>` event.
"""

from __future__ import annotations

from .core import *
from .utils import *


__all__: tuple[str, ...] = ("__version__",)
__all__ += core.__all__
__all__ += utils.__all__

__version__: str = "20.8.2025"
