"""
Configuration module for the timekeeping system.
"""
from .settings import (
    TimekeepingConfig,
    get_config,
    load_config,
    reload_config
)

__all__ = [
    'TimekeepingConfig',
    'get_config',
    'load_config',
    'reload_config'
]
