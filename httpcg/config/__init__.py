"""Configuration for httpcg."""

from .settings import HTTPClientSettings, builder_from_settings


__all__ = ["HTTPClientSettings", "builder_from_settings"]
