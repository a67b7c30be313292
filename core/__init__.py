"""Core module - Logger and exception hierarchy."""

from core.exceptions import MaxPainError
from core.logger import get_logger, setup_logger

__all__ = ['setup_logger', 'get_logger', 'MaxPainError']
