"""
Shared Toolkit Module
======================

Configuration, logging, console and math utilities shared by the
toolkit's tools.
"""

from shared.config import ConfigError, GlobalConfig, SiftConfig, ToolkitConfig

__all__ = ["ConfigError", "GlobalConfig", "SiftConfig", "ToolkitConfig"]
