# Copyright 2026 The Kubernetes Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""
This module manages OpenTelemetry tracing for the NetworkPolicy reconciler.
It configures a process-wide TracerProvider exporting over OTLP and provides a
decorator that wraps reconciler methods in spans.
"""

import atexit
import functools
import logging
import threading

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

DEFAULT_SERVICE_NAME = "ocm-agent-policy"

# --- Global state for the singleton TracerProvider ---
_TRACER_PROVIDER = None
_TRACER_PROVIDER_LOCK = threading.Lock()


def initialize_tracer(service_name: str):
    """
    Initializes the global OpenTelemetry TracerProvider using the singleton pattern.

    This function uses double-checked locking to ensure thread-safe, one-time initialization.
    If the provider is already initialized with a different 'service_name', a warning is
    logged and the existing provider is kept.
    """
    global _TRACER_PROVIDER

    # First check (no lock) for performance.
    if _TRACER_PROVIDER is not None:
        existing_name = _TRACER_PROVIDER.resource.attributes.get("service.name")
        if existing_name and existing_name != service_name:
            logging.warning(
                f"Global TracerProvider already initialized with service name '{existing_name}'. "
                f"Ignoring request to initialize with '{service_name}'."
            )
        return

    with _TRACER_PROVIDER_LOCK:
        # Second check (with lock) to ensure thread safety.
        if _TRACER_PROVIDER is None:
            resource = Resource(attributes={"service.name": service_name})
            _TRACER_PROVIDER = TracerProvider(resource=resource)
            _TRACER_PROVIDER.add_span_processor(
                BatchSpanProcessor(OTLPSpanExporter())
            )
            trace.set_tracer_provider(_TRACER_PROVIDER)
            atexit.register(_TRACER_PROVIDER.shutdown)
            logging.info(
                f"Global OpenTelemetry TracerProvider configured for service '{service_name}'.")


def get_tracer(service_name: str = DEFAULT_SERVICE_NAME):
    """Returns a tracer scoped to the given service name."""
    return trace.get_tracer(service_name.replace('-', '_'))


def trace_span(span_suffix):
    """
    Decorator to wrap a method in an OpenTelemetry span named
    "{self.trace_service_name}.{span_suffix}".

    If `self.tracer` is None (tracing disabled), the method runs without a span.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            tracer = getattr(self, 'tracer', None)
            if not tracer:
                return func(self, *args, **kwargs)

            service_name = getattr(
                self, 'trace_service_name', DEFAULT_SERVICE_NAME)
            span_name = f"{service_name}.{span_suffix}"

            with tracer.start_as_current_span(span_name):
                return func(self, *args, **kwargs)
        return wrapper
    return decorator


def set_span_attributes(attributes: dict):
    """Records attributes on the current span when it is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        for key, value in attributes.items():
            span.set_attribute(key, value)
