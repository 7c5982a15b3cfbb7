import logging
import os
import sys


def configure_logging(default_level: int = logging.INFO, override_env: bool = False) -> None:
    """Configure the root logger with a single stderr handler.

    Respects TURNSTORE_LOG_LEVEL env var if present, unless override_env is set
    (the CLI's --debug flag).
    """
    level = default_level
    level_name = os.getenv("TURNSTORE_LOG_LEVEL")
    if level_name and not override_env:
        env_level = getattr(logging, level_name.upper(), None)
        if isinstance(env_level, int):
            level = env_level

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger()
    root.setLevel(level)
    # Remove existing handlers to avoid duplicates on repeated calls
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
