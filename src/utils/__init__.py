"""Cross-cutting utilities.

This package provides shared primitives for:
    - Channel rescaling and color parsing (color)
    - Atomic I/O (fs)
    - Unified logging (logging_config)
    - Config validation (validators)

validators pulls in pydantic and is only needed by scene rendering and the
CLIs, so it is not imported here; src.pixmap.codec imports this package
for fs and stays free of pydantic.

Convenience imports:
    from src.utils import fs, color
    from src.utils import validators
    from src.utils.logging_config import setup_logging, get_logger
"""

from . import color
from . import fs
from . import logging_config

from .logging_config import get_logger, push_context, setup_logging

__all__ = [
    # Modules
    'color',
    'fs',
    'logging_config',
    # Direct exports
    'setup_logging',
    'get_logger',
    'push_context',
]
