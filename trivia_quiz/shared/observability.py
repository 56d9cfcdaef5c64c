import logging
import os

# --- OTel Tracing Imports ---
from opentelemetry import trace
from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

# --- Prometheus Import ---
from prometheus_client import start_http_server

SERVICE_NAME = "trivia-quiz-app"
METRICS_PORT = int(os.getenv("TRIVIA_METRICS_PORT", "8000"))

logger = logging.getLogger(__name__)


def configure_observability() -> bool:
    """
    Ships traces and logs over OTLP and exposes Prometheus metrics.
    Returns False (and does nothing) when the OTLP env vars are absent.
    """
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    headers = os.getenv("OTEL_EXPORTER_OTLP_HEADERS")

    if not endpoint or not headers:
        logger.warning(
            "Observability: OTEL env vars not set. Telemetry stays local."
        )
        return False

    resource = Resource.create({"service.name": SERVICE_NAME})

    # --- A. Tracing ---
    trace_provider = TracerProvider(resource=resource)
    trace_provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, headers=headers))
    )
    trace.set_tracer_provider(trace_provider)

    # --- B. Logging ---
    logger_provider = LoggerProvider(resource=resource)
    logger_provider.add_log_record_processor(
        BatchLogRecordProcessor(OTLPLogExporter(endpoint=endpoint, headers=headers))
    )
    set_logger_provider(logger_provider)
    logging.getLogger().addHandler(
        LoggingHandler(level=logging.INFO, logger_provider=logger_provider)
    )

    # --- C. Metrics ---
    try:
        start_http_server(METRICS_PORT)
        logger.info("Prometheus metrics server started on port %s", METRICS_PORT)
    except OSError:
        # Streamlit reruns the script; the first run already owns the port.
        logger.warning("Prometheus port %s already in use. Skipping.", METRICS_PORT)

    return True
