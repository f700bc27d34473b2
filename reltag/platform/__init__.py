"""Platform abstraction layer."""

from .files import atomic_write_text
from .process import ProcessError, run, run_async

__all__ = [
    "atomic_write_text",
    "ProcessError",
    "run",
    "run_async",
]
