"""Configuration package."""

from confmod.config.settings import Settings

__all__ = ["Settings"]
