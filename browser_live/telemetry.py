"""OpenTelemetry instrumentation for MCP tools."""

import asyncio
import functools
import json
import os
from typing import Any, Callable, Optional, TypeVar

import structlog
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Status, StatusCode

from . import __version__

logger = structlog.get_logger()

# Type variable for generic decorator
F = TypeVar("F", bound=Callable[..., Any])


def setup_monitoring(
    service_name: str, otlp_endpoint: Optional[str] = None
) -> TracerProvider:
    """
    Setup OpenTelemetry tracing for the server.

    Args:
        service_name: Name reported to the collector
        otlp_endpoint: OTLP gRPC endpoint (e.g., "http://jaeger:4317").
            If None, spans are created but not exported.

    Returns:
        TracerProvider instance
    """
    resource = Resource.create(
        {
            "service.name": service_name,
            "service.version": __version__,
            "deployment.environment": os.getenv("ENVIRONMENT", "development"),
        }
    )
    provider = TracerProvider(resource=resource)

    if otlp_endpoint:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter,
        )

        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
        )
        logger.info("OTLP trace export enabled", endpoint=otlp_endpoint)

    trace.set_tracer_provider(provider)

    # Propagate traces into Browser Use API calls
    from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

    HTTPXClientInstrumentor().instrument()
    return provider


def _record_params(span: trace.Span, args: tuple, kwargs: dict) -> None:
    params_dict = {"args": args, "kwargs": kwargs}
    try:
        span.set_attribute("mcp.params", json.dumps(params_dict, default=str))
    except (TypeError, ValueError):
        span.set_attribute("mcp.params", str(params_dict))


def _record_result(span: trace.Span, result: Any) -> None:
    if not isinstance(result, dict):
        return
    task_id = result.get("taskId") or result.get("task_id")
    widget = result.get("widget")
    if task_id is None and isinstance(widget, dict):
        task_id = widget.get("props", {}).get("taskId")
    if task_id:
        span.set_attribute("task.id", str(task_id))
    if result.get("success") is False:
        span.set_attribute("mcp.failed", True)


def trace_mcp_tool(tool_name: str) -> Callable[[F], F]:
    """
    Decorator to add OpenTelemetry tracing to MCP tools.

    Creates a span named ``mcp.tool.<tool_name>`` with attributes:
    - mcp.tool: Tool name
    - mcp.params: Tool parameters (JSON serialized)
    - task.id: Browser task ID if present in the result

    Example:
        @mcp.tool()
        @trace_mcp_tool("check_task_result")
        async def check_task_result(task_id: str):
            ...
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            # Get tracer dynamically to support test fixtures
            tracer = trace.get_tracer(__name__)
            with tracer.start_as_current_span(f"mcp.tool.{tool_name}") as span:
                span.set_attribute("mcp.tool", tool_name)
                _record_params(span, args, kwargs)
                try:
                    result = func(*args, **kwargs)
                    _record_result(span, result)
                    span.set_status(Status(StatusCode.OK))
                    return result
                except Exception as e:
                    span.record_exception(e)
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    raise

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            tracer = trace.get_tracer(__name__)
            with tracer.start_as_current_span(f"mcp.tool.{tool_name}") as span:
                span.set_attribute("mcp.tool", tool_name)
                _record_params(span, args, kwargs)
                try:
                    result = await func(*args, **kwargs)
                    _record_result(span, result)
                    span.set_status(Status(StatusCode.OK))
                    return result
                except Exception as e:
                    span.record_exception(e)
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    raise

        if asyncio.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator
