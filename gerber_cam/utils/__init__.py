"""Cross-cutting utilities.

This package provides shared primitives for:
    - Atomic I/O and YAML loading (fs)
    - Gerber checksums and file provenance (hashing)
    - Unified logging (logging_config)
    - Plot job schemas (validators)

Convenience imports:
    from gerber_cam.utils import fs, hashing, validators
    from gerber_cam.utils.logging_config import setup_logging, push_context
"""

from . import fs
from . import hashing
from . import logging_config
from . import validators

from .logging_config import push_context, setup_logging

__all__ = [
    # Modules
    'fs',
    'hashing',
    'logging_config',
    'validators',
    # Direct exports
    'setup_logging',
    'push_context',
]
