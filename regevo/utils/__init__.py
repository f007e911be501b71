"""Utility helpers shared across the *regevo* codebase."""

from regevo.utils.logger_setup import setup_logger

__all__ = ["setup_logger"]
