# Configuration package
"""
Configuration package for Sarathi
Exports settings from settings.py for easy import
"""
from .settings import settings, validate_settings

__all__ = ["settings", "validate_settings"]
