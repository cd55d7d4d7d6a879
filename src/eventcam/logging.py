import logging

import structlog

from eventcam.config import Config

# Client libraries that log every request or heartbeat at DEBUG/INFO
NOISY_LOGGERS = ("pymongo", "botocore", "boto3", "urllib3", "httpx", "httpcore")


def setup_logging(config: Config) -> None:
    """Configure structlog on top of stdlib logging.

    Console output in debug mode, one JSON object per line otherwise. The
    request id bound by the HTTP middleware is merged into every event.
    """
    log_level = logging.DEBUG if config.debug else logging.INFO
    logging.basicConfig(level=log_level, format="%(message)s")

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if config.debug and not config.production:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    structlog.get_logger(__name__).debug("logging_configured", level=logging.getLevelName(log_level))
