"""Prometheus metrics instrumentation for the caption pipeline.

Exposes metrics for monitoring latency, throughput, and outcomes
of the live translation pipeline. Metrics are exposed via HTTP
on port 8001 (configurable) when enabled in settings.

Metrics exported:
- pipeline_stage_latency_seconds: Histogram of processing time per stage
- pipeline_chunks_processed_total: Counter of processed chunks by outcome
- pipeline_chunks_emitted_total: Counter of chunks emitted by the accumulator
- pipeline_chunks_in_flight: Gauge of chunk pipelines currently running
- glossary_uploads_total: Counter of glossary table replacements

Usage:
    from meeting_translator.services.metrics import start_metrics_server, chunks_processed

    start_metrics_server(port=8001)
    chunks_processed.labels(status='translated').inc()
"""

from prometheus_client import Histogram, Counter, Gauge, start_http_server
import logging

logger = logging.getLogger(__name__)

# Latency tracking per stage
stage_latency = Histogram(
    'pipeline_stage_latency_seconds',
    'Time spent in each pipeline stage',
    labelnames=['component']  # component: transcode, transcribe, translate, total
)

# Chunk outcome counters
chunks_processed = Counter(
    'pipeline_chunks_processed_total',
    'Total audio chunks that completed the pipeline',
    labelnames=['status']  # status: translated, filtered, failed
)

chunks_emitted = Counter(
    'pipeline_chunks_emitted_total',
    'Total audio chunks emitted by the accumulator',
    labelnames=['trigger']  # trigger: threshold, drain
)

# In-flight chunk pipelines
chunks_in_flight = Gauge(
    'pipeline_chunks_in_flight',
    'Number of chunk pipelines currently running'
)

glossary_uploads = Counter(
    'glossary_uploads_total',
    'Number of glossary table replacements'
)


def start_metrics_server(port: int = 8001):
    """Start Prometheus metrics HTTP server."""
    try:
        start_http_server(port)
        logger.info(f"Metrics server started on port {port}")
    except OSError as e:
        logger.error(f"Failed to start metrics server: {e}")
