"""\
Application setup
=================

Author: Akshay Mestry <xa@mes3.dev>
Created on: Thursday, July 31 2025
Last updated on: Tuesday, August 19 2025

This module wires the ambient services of the framework, logging and
tracing, from a single :class:`ripple.core.config.Config` object.
"""

from __future__ import annotations

import typing as t

from ripple.core.config import Config
from ripple.utils.logging import configure
from ripple.utils.logging import get_logger
from ripple.utils.opentelemetry import get_tracer

if t.TYPE_CHECKING:
    from opentelemetry.trace import Tracer

__all__: tuple[str, ...] = ("setup",)


def setup(config: Config | None = None) -> Tracer:
    """Configure logging and tracing for the framework.

    :param config: The framework configuration. If not provided, a
        default `Config` instance is used.
    :return: The tracer the framework reports its spans to.
    """
    config = config or Config()
    configure(config.logger, name=config.name)
    logger = get_logger(__name__)
    logger.info(
        f"Configured {config.name} {config.version}",
        extra={"debug": config.debug, "telemetry": config.telemetry.enable},
    )
    return get_tracer(config)
