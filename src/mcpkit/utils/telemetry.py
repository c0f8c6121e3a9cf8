"""OpenTelemetry tracing for mcpkit.

Instrumented code only needs the API::

    from mcpkit.utils.telemetry import ATTR_TOOL_NAME, get_tracer

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("mcpkit.tool.call") as span:
        span.set_attribute(ATTR_TOOL_NAME, "calculator/add")

Spans are no-ops until :func:`configure_telemetry` installs an SDK tracer
provider from the server's :class:`~mcpkit.config.TelemetrySettings`
(requires the ``otel`` extra: ``pip install mcpkit[otel]``).

Spans emitted:

- ``mcpkit.rpc.request``: one per JSON-RPC request, with the method, the
  error code when the reply is an error, and the session id minted by
  ``initialize``.
- ``mcpkit.tool.call``: one per handler invocation, with the tool name and
  whether the handler reported an error.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from opentelemetry import trace

if TYPE_CHECKING:
    from mcpkit.config import TelemetrySettings

logger = logging.getLogger(__name__)

ATTR_RPC_METHOD = "mcpkit.rpc.method"
ATTR_RPC_ERROR_CODE = "mcpkit.rpc.error_code"
ATTR_TOOL_NAME = "mcpkit.tool.name"
ATTR_TOOL_IS_ERROR = "mcpkit.tool.is_error"
ATTR_SESSION_ID = "mcpkit.session.id"

_INSTRUMENTATION_NAME = "mcpkit"

_SDK_MISSING = (
    "opentelemetry-sdk is required for tracing. Install it with: pip install mcpkit[otel]"
)
_OTLP_MISSING = (
    "opentelemetry-exporter-otlp is required to export to {endpoint}. "
    "Install it with: pip install mcpkit[otel]"
)


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a tracer for *name*; a no-op one unless tracing is configured."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def build_span_exporter(settings: TelemetrySettings) -> Any:
    """Pick the span exporter for *settings*.

    Spans go to the OTLP/gRPC endpoint when ``otlp_endpoint`` is set and are
    printed to stdout otherwise.

    Raises:
        ImportError: If the SDK, or the OTLP exporter when an endpoint is
            set, is not installed.
    """
    if settings.otlp_endpoint:
        try:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
        except ImportError as exc:
            raise ImportError(_OTLP_MISSING.format(endpoint=settings.otlp_endpoint)) from exc
        return OTLPSpanExporter(endpoint=settings.otlp_endpoint)

    try:
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter
    except ImportError as exc:
        raise ImportError(_SDK_MISSING) from exc
    return ConsoleSpanExporter()


def configure_telemetry(settings: TelemetrySettings, *, service_name: str) -> Any | None:
    """Install a tracer provider built from *settings*.

    Does nothing and returns ``None`` when ``settings.enabled`` is false.
    Otherwise returns the installed ``TracerProvider``.  OTLP export is
    batched; console export is written span by span.  *service_name* is
    used unless ``settings.service_name`` overrides it.

    Raises:
        ImportError: If the ``otel`` extra is not installed.
    """
    if not settings.enabled:
        return None

    try:
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor
    except ImportError as exc:
        raise ImportError(_SDK_MISSING) from exc

    exporter = build_span_exporter(settings)
    processor_cls = BatchSpanProcessor if settings.otlp_endpoint else SimpleSpanProcessor

    name = settings.service_name or service_name
    provider = TracerProvider(resource=Resource.create({"service.name": name}))
    provider.add_span_processor(processor_cls(exporter))
    trace.set_tracer_provider(provider)

    logger.info(
        "Tracing enabled for service '%s' (exporting to %s)",
        name,
        settings.otlp_endpoint or "console",
    )
    return provider
