"""
cs-common: Shared library for CallScript.

Provides the common data models, configuration management, structured
logging, and Prometheus metrics helpers used by the dialogue engine and
by the call-orchestration layer that drives it.
"""

from cs_common.config import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
