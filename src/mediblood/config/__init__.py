"""Configuration module for the order desk."""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
