"""Shared utilities: logging and async fan-out."""

from movieapp.utils.concurrency import gather_or_cancel
from movieapp.utils.logger import setup_logger

__all__ = ["gather_or_cancel", "setup_logger"]
