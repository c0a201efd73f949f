import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the root logger.

    Uvicorn installs its own handlers; ``force`` keeps a reload from stacking
    duplicate handlers on ours.
    """
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, force=True)
    # pymongo logs every heartbeat at DEBUG
    logging.getLogger("pymongo").setLevel(logging.WARNING)
