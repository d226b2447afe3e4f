"""
core/config.py
----------------

Library configuration module.

Defines strongly-typed settings loaded from the environment using
``pydantic-settings``.  These settings control the default transport:
timeouts, redirects, HTTP/2 and connection pool limits.  They are read
once, when the shared transport is first built, and are never
overridden per request.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings loaded from environment variables.

    The settings structure is flat and uses environment variables
    prefixed with ``TERSE_``.  For example, to lower the default read
    timeout you can set ``TERSE_READ_TIMEOUT=5``.
    """

    # Transport timeouts (seconds)
    connect_timeout: float = Field(30.0, gt=0, description="Connection timeout in seconds.")
    read_timeout: float = Field(30.0, gt=0, description="Read timeout in seconds.")
    write_timeout: float = Field(30.0, gt=0, description="Write timeout in seconds.")
    pool_timeout: float = Field(30.0, gt=0, description="Seconds to wait for a pooled connection.")

    # Transport behaviour
    follow_redirects: bool = Field(True, description="Follow 3xx redirects transparently.")
    http2: bool = Field(False, description="Negotiate HTTP/2 when the server supports it.")
    max_connections: int = Field(100, ge=1, description="Maximum number of pooled connections.")
    max_keepalive_connections: int = Field(20, ge=0, description="Maximum idle keep-alive connections.")
    user_agent: Optional[str] = Field(None, description="Default User-Agent header for the shared client.")

    # Logging
    log_bodies: bool = Field(False, description="Include request bodies in DEBUG request logs.")

    model_config = SettingsConfigDict(env_prefix="TERSE_", env_file=None, case_sensitive=False)


@lru_cache()
def get_settings() -> Settings:
    """Return a cached instance of the library settings.

    Call ``get_settings.cache_clear()`` after changing the environment
    to force a reload.
    """
    return Settings()
