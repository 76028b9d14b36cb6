"""Configuration management for ftcsync.

Loads and validates YAML-based configuration with Pydantic models.
Supports environment variable overrides for the robot address and
remote source directory.
"""

from ftcsync.config.settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]
