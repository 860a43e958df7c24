# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for probeport."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_API_URL = "https://api.stackeye.io"
DEFAULT_USER_AGENT = f"probeport/{__version__}"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _str_env(name: str, default: str | None) -> str | None:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip()
    return value or default


@dataclass
class ApiSettings:
    """Remote API and run defaults."""

    api_url: str = DEFAULT_API_URL
    api_key: str | None = None
    timeout: float = 30.0
    max_retries: int = 2
    backoff_factor: float = 2.0
    initial_delay: float = 0.5
    verify_ssl: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    import_timeout: float = 120.0
    export_timeout: float = 60.0
    page_size: int = 100

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> "ApiSettings":
        """Create settings from environment variables (evaluated at call time)."""
        page_size = _int_env("PROBEPORT_PAGE_SIZE", cls.page_size)
        if page_size <= 0:
            page_size = cls.page_size
        return cls(
            api_url=(_str_env("PROBEPORT_API_URL", cls.api_url) or cls.api_url).rstrip("/"),
            api_key=_str_env("PROBEPORT_API_KEY", None),
            timeout=_float_env("PROBEPORT_HTTP_TIMEOUT", cls.timeout),
            max_retries=_int_env("PROBEPORT_HTTP_RETRIES", cls.max_retries),
            backoff_factor=_float_env("PROBEPORT_HTTP_BACKOFF", cls.backoff_factor),
            initial_delay=_float_env("PROBEPORT_HTTP_INITIAL_DELAY", cls.initial_delay),
            verify_ssl=_bool_env("PROBEPORT_HTTP_VERIFY_SSL", cls.verify_ssl),
            user_agent=_str_env("PROBEPORT_USER_AGENT", cls.user_agent) or cls.user_agent,
            import_timeout=_float_env("PROBEPORT_IMPORT_TIMEOUT", cls.import_timeout),
            export_timeout=_float_env("PROBEPORT_EXPORT_TIMEOUT", cls.export_timeout),
            page_size=page_size,
        )


def load_api_settings() -> ApiSettings:
    """Load API settings from environment with sensible defaults."""
    return ApiSettings.from_env()
