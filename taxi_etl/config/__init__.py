"""Configuration management module"""

from .settings import settings, Settings, SnowflakeConfig, EtlConfig

__all__ = ['settings', 'Settings', 'SnowflakeConfig', 'EtlConfig']
