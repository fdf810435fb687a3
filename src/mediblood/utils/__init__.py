"""Utility helpers for the order desk."""

from .logging import setup_logging

__all__ = ["setup_logging"]
