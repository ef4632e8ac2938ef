# Licensed under the Apache License, Version 2.0
import logging
import os

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging from PATHSIEVE_LOG_LEVEL; `verbose` forces DEBUG."""
    level_name = os.getenv("PATHSIEVE_LOG_LEVEL", "INFO").upper()
    level = logging.DEBUG if verbose else getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format=DEFAULT_FORMAT)
    logging.getLogger().setLevel(level)
