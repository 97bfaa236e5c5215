import logging

VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# HTTP client loggers that would otherwise log every upstream POST
HTTP_LOGGERS = [
    "openai._base_client",
    "anthropic._base_client",
    "httpx",
    "httpcore",
    "httpcore.connection",
    "httpcore.http11",
    "httpcore.http2",
    "httpx._client",
]

logger = logging.getLogger("websearch_relay")


def parse_log_level(log_level: str) -> str:
    # Extract just the first word to handle comments
    parts = str(log_level or "").split()
    level = parts[0].upper() if parts else ""
    if level not in VALID_LEVELS:
        level = "INFO"
    return level


def configure_logging(log_level: str = "INFO") -> str:
    """Configure root logging and quiet noisy HTTP loggers. Returns the effective level."""
    level = parse_log_level(log_level)

    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    # Configure uvicorn to be quieter
    for uvicorn_logger in ["uvicorn", "uvicorn.access", "uvicorn.error"]:
        logging.getLogger(uvicorn_logger).setLevel(logging.WARNING)

    for logger_name in HTTP_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    return level
