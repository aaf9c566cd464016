"""
Structured JSON logging for ingestion observability.

Provides structured logging with trace IDs for correlating logs across
a refresh run, plus context managers for stage timing and LLM calls.
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime

# Context variables for trace correlation
trace_id_var: ContextVar[str | None] = ContextVar("trace_id", default=None)
stage_var: ContextVar[str | None] = ContextVar("stage", default=None)


# -----------------------------------------------------------------------------
# JSON Formatter
# -----------------------------------------------------------------------------


class JSONFormatter(logging.Formatter):
    """
    Format log records as single-line JSON.

    Output format:
    {"timestamp": "...", "level": "INFO", "message": "...", "trace_id": "...", ...}
    """

    EXTRA_FIELDS = (
        "event",
        "duration_ms",
        "feed_id",
        "source_type",
        "strategy",
        "items_added",
        "items_skipped",
        "items_failed",
        "model",
        "provider",
        "tokens_in",
        "tokens_out",
    )

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        trace_id = trace_id_var.get()
        if trace_id:
            log_data["trace_id"] = trace_id

        stage = stage_var.get()
        if stage:
            log_data["stage"] = stage

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key in self.EXTRA_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        return json.dumps(log_data, default=str)


def configure_logging(json_format: bool = True, level: str = "INFO") -> None:
    """
    Configure root logging.

    Args:
        json_format: If True, use JSON format. If False, use human-readable format.
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level.upper()))

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("trafilatura").setLevel(logging.WARNING)


# -----------------------------------------------------------------------------
# Context Managers
# -----------------------------------------------------------------------------


@contextmanager
def log_stage(stage: str, trace_id: str | None = None):
    """
    Context manager for stage-level logging.

    Logs stage start and end with duration.

    Usage:
        with log_stage("refresh_all", trace_id=run_id):
            ...
    """
    if trace_id:
        trace_id_var.set(trace_id)
    stage_var.set(stage)

    start_time = time.time()
    logger = logging.getLogger("ingestion")

    logger.info(f"Stage {stage} started", extra={"event": "stage_start"})

    try:
        yield
        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Stage {stage} completed",
            extra={"event": "stage_complete", "duration_ms": duration_ms},
        )
    except Exception as e:
        duration_ms = int((time.time() - start_time) * 1000)
        logger.error(
            f"Stage {stage} failed: {e}",
            extra={"event": "stage_failed", "duration_ms": duration_ms},
            exc_info=True,
        )
        raise
    finally:
        stage_var.set(None)


@contextmanager
def log_llm_call(provider: str, model: str, call_type: str):
    """
    Context manager for LLM call instrumentation.

    Usage:
        with log_llm_call("openai", "gpt-4o-mini", "classify") as metrics:
            response = await client.chat.completions.create(...)
            metrics["tokens_in"] = response.usage.prompt_tokens
            metrics["tokens_out"] = response.usage.completion_tokens
    """
    start_time = time.time()
    logger = logging.getLogger("ingestion.llm")
    metrics: dict = {"tokens_in": 0, "tokens_out": 0}

    try:
        yield metrics

        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"LLM call completed: {provider}/{model} for {call_type} ({duration_ms}ms)",
            extra={
                "event": "llm_call_complete",
                "provider": provider,
                "model": model,
                "duration_ms": duration_ms,
                "tokens_in": metrics["tokens_in"],
                "tokens_out": metrics["tokens_out"],
            },
        )
    except Exception as e:
        duration_ms = int((time.time() - start_time) * 1000)
        logger.warning(
            f"LLM call failed: {provider}/{model} for {call_type} - {e}",
            extra={
                "event": "llm_call_failed",
                "provider": provider,
                "model": model,
                "duration_ms": duration_ms,
            },
        )
        raise
