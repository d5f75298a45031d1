"""structlog setup shared by the API server and the CLI.

stdlib loggers (``logging.getLogger(__name__)``) and structlog loggers both
end up on one stdout handler, rendered as JSON in production or as a coloured
console stream locally.
"""

import logging
import sys

import structlog

# Third-party loggers that log every request or statement at INFO
NOISY_LOGGERS = ("uvicorn.access", "httpx", "openai", "sqlalchemy.engine")


def _pre_chain() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]


def _renderer(json_output: bool):
    if json_output:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(log_level: str = "info", json_output: bool = False) -> None:
    """Route stdlib and structlog records through one formatter.

    Args:
        log_level: debug/info/warning/error; unknown names fall back to info.
        json_output: JSON lines for log shippers instead of console output.
    """
    pre_chain = _pre_chain()
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(json_output),
            ],
            foreign_pre_chain=pre_chain,
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_request_context(trace_id: str, client_id: str | None = None) -> None:
    """Attach the trace id, and the calling workspace if known, to every log line."""
    structlog.contextvars.bind_contextvars(trace_id=trace_id)
    if client_id:
        structlog.contextvars.bind_contextvars(client_id=client_id)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
