import logging

logger = logging.getLogger(__name__)


def select_assistant(primary, fallback):
    """Pick the assistant backend once, at startup.

    A configured primary is used exclusively, even when its calls fail; the
    fallback is only used when no primary is configured. There is no
    per-request fallback chain.
    """
    if primary is not None and primary.configured:
        logger.info(f"Assistant backend: {primary.name} ({primary.base_url})")
        return primary
    logger.info(f"Assistant backend: {fallback.name} ({fallback.base_url})")
    return fallback
