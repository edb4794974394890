"""\
Core
====

Author: Akshay Mestry <xa@mes3.dev>
Created on: Saturday, August 02 2025
Last updated on: Wednesday, August 20 2025

This module acts as an entry point for combining the attribute engine,
the event facility, and the configurations used throughout this
framework.
"""

from __future__ import annotations

from .app import *
from .attributes import *
from .base import *
from .compare import *
from .config import *
from .error import *
from .events import *
from .merger import *


__all__: tuple[str, ...] = (
    app.__all__
    + attributes.__all__
    + base.__all__
    + compare.__all__
    + config.__all__
    + error.__all__
    + events.__all__
    + merger.__all__
)
