"""
esconnect - OpenTelemetry Tracing

Every engine request runs inside one client span (request_span()). Without
configure_tracing() the spans go to whatever provider the application
installed, or nowhere.

Patterns Applied:
- One-time configure_tracing() at startup
- Minimal manual instrumentation (one span per HTTP request)
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Final

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME as RESOURCE_SERVICE_NAME
from opentelemetry.sdk.resources import SERVICE_VERSION as RESOURCE_SERVICE_VERSION
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor, SpanExporter
from opentelemetry.trace import SpanKind, Status, StatusCode

from esconnect._version import __version__

SERVICE_NAME: Final[str] = "esconnect"
REQUEST_SPAN: Final[str] = "elasticsearch.request"

# Provider installed by configure_tracing(); None until then
_provider: TracerProvider | None = None


def configure_tracing(
    service_name: str = SERVICE_NAME,
    console_export: bool = True,
    exporter: SpanExporter | None = None,
) -> TracerProvider:
    """Install an SDK tracer provider for the process.

    Only the first call takes effect until reset_tracing() is called; later
    calls return the installed provider.

    Args:
        service_name: ``service.name`` resource attribute
        console_export: Also print finished spans to stdout (development)
        exporter: Additional exporter, e.g. an OTLP or in-memory exporter

    Returns:
        The installed provider
    """
    global _provider

    if _provider is not None:
        return _provider

    resource = Resource.create(
        {
            RESOURCE_SERVICE_NAME: service_name,
            RESOURCE_SERVICE_VERSION: __version__,
        }
    )
    provider = TracerProvider(resource=resource)
    if console_export:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
    if exporter is not None:
        provider.add_span_processor(SimpleSpanProcessor(exporter))

    # The global provider can only be set once per process; get_tracer()
    # prefers _provider so a reconfigured provider still receives spans.
    trace.set_tracer_provider(provider)
    _provider = provider
    return provider


def get_tracer(name: str) -> Any:
    """Get a tracer from the installed provider, or the global one."""
    if _provider is not None:
        return _provider.get_tracer(name, __version__)
    return trace.get_tracer(name, __version__)


@contextmanager
def request_span(method: str, url: str) -> Iterator[Any]:
    """Span around one engine request.

    Exceptions leaving the block are recorded on the span. Callers report
    the answer with record_status().
    """
    tracer = get_tracer("esconnect.clients")
    with tracer.start_as_current_span(
        REQUEST_SPAN,
        kind=SpanKind.CLIENT,
        attributes={
            "db.system": "elasticsearch",
            "http.request.method": method,
            "url.full": url,
        },
    ) as span:
        yield span


def record_status(span: Any, status_code: int) -> None:
    """Attach the response status; 5xx answers mark the span as failed."""
    span.set_attribute("http.response.status_code", status_code)
    if status_code >= 500:
        span.set_status(Status(StatusCode.ERROR, f"HTTP {status_code}"))


def reset_tracing() -> None:
    """Shut down the installed provider (tests)."""
    global _provider
    if _provider is not None:
        _provider.shutdown()
    _provider = None
