"""OTLP exporter using OpenTelemetry OTLP HTTP exporter."""

from __future__ import annotations

from typing import Dict, Optional

from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter


def create_otlp_exporter(
    endpoint: Optional[str] = None,
    api_key: Optional[str] = None,
    timeout: float = 10.0,
    headers: Optional[Dict[str, str]] = None,
) -> OTLPSpanExporter:
    """
    Build an OTLP/HTTP span exporter.

    Args:
        endpoint: OTLP traces endpoint URL (defaults to OTel's env/default)
        api_key: Optional bearer token for authentication
        timeout: Request timeout in seconds
        headers: Optional additional headers
    """
    export_headers = dict(headers) if headers else {}
    if api_key:
        export_headers["Authorization"] = f"Bearer {api_key}"

    return OTLPSpanExporter(
        endpoint=endpoint,
        timeout=timeout,
        headers=export_headers or None,
    )
