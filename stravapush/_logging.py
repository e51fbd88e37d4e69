import logging
import re

logger = logging.getLogger("stravapush")

_SECRET_PARAMS = re.compile(r"((?:client_secret|verify_token)=)[^&\s]+")


def mask_secret(text: str) -> str:
    """Replace secret query/form values with ``***``."""
    return _SECRET_PARAMS.sub(r"\1***", text)

def log_request(method: str, url: str):
    logger.debug("stravapush → %s %s", method, mask_secret(url))

def log_response(status: int, url: str, elapsed_ms: float):
    logger.debug("stravapush ← %d %s (%.0fms)", status, mask_secret(url), elapsed_ms)
