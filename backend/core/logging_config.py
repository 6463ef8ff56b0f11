"""
core/logging_config.py
──────────────────────
One-time ``logging`` setup for the API process.

Modules never configure logging themselves; they only call
``logging.getLogger(__name__)``.  The FastAPI lifespan calls
:func:`configure_logging` once at startup.
"""

import logging

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# TensorFlow and its helpers are chatty at INFO.
_NOISY_LOGGERS = ("tensorflow", "absl", "h5py")


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the root logger.

    Args:
        level: Level name such as ``"INFO"`` or ``"DEBUG"``.

    Raises:
        ValueError: If ``level`` is not a known logging level.
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")

    logging.basicConfig(level=numeric, format=_FORMAT, force=True)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric, logging.WARNING))
