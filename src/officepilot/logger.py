import sys

import structlog

_LEVELS = {
    "TRACE": 5,
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
}


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Run-scoped values (run id, operation id) bound with
    ``structlog.contextvars.bind_contextvars`` are merged into every event.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    from officepilot.config import get_config

    config = get_config()
    log_dir = config.paths.logs_dir
    if log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)

    log_level = _LEVELS.get(config.advanced.log_level, 20)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # stdout is reserved for API/CLI payloads
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,  # Disable cache to allow level updates
    )

    return structlog.get_logger(name).bind(logger=name)
