import logging
from typing import Optional

import structlog


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(message)s")

    # Suppress noisy library logs
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def mask_token(token: Optional[str]) -> str:
    """
    Mask token for logging, showing only first and last 8 characters.

    Args:
        token: Token to mask

    Returns:
        Masked token string
    """
    if not token:
        return "(none)"
    if len(token) <= 16:
        return "*" * len(token)
    return token[:8] + "*" * (len(token) - 16) + token[-8:]
