"""\
OpenTelemetry
=============

Author: Akshay Mestry <xa@mes3.dev>
Created on: Friday, July 04 2025
Last updated on: Tuesday, August 19 2025

This module provides `OpenTelemetry` integration for the framework. The
attribute engine opens spans around initialisation and change flushes
through the global tracer provider, so configuring a provider here is
enough to see them.
"""

from __future__ import annotations

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
    OTLPSpanExporter,
)
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.export import ConsoleSpanExporter
from opentelemetry.sdk.trace.export import SimpleSpanProcessor

from ripple.core.config import Config

__all__: list[str] = ["get_tracer", "make_provider"]


def make_provider(config: Config) -> TracerProvider:
    """Build a tracer provider from the telemetry configuration.

    When telemetry is disabled the provider has no span processor. In
    debug mode spans are printed to the console, otherwise they are
    exported over OTLP.

    :param config: The framework configuration.
    :return: A configured `TracerProvider`.
    """
    service = config.telemetry.name or config.name
    resource = Resource.create(
        {
            "service.name": service,
            "service.version": config.version,
            "deployment.environment": (
                "development" if config.debug else "production"
            ),
            "telemetry.sdk.name": "ripple",
        }
    )
    provider = TracerProvider(resource=resource)
    if not config.telemetry.enable:
        return provider
    if config.debug:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
    else:
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter()))
    return provider


def get_tracer(
    config: Config | None = None,
    name: str | None = None,
) -> trace.Tracer:
    """Configure the global tracer provider and return a tracer.

    :param config: An optional configuration object to initialise the
        tracer. If not provided, a default `Config` instance is created.
    :param name: Override for the service name, defaults to `None`. If
        not provided, uses the name from the configuration.
    :return: A configured `OpenTelemetry Tracer` instance.
    """
    if config is None:
        config = Config()
    trace.set_tracer_provider(make_provider(config))
    return trace.get_tracer(name or config.telemetry.name or config.name)
