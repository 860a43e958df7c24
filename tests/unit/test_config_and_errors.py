# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import httpx

from probeport.config import DEFAULT_API_URL, DEFAULT_USER_AGENT, ApiSettings, load_api_settings
from probeport.errors import (
    EXIT_AUTH,
    EXIT_MISUSE,
    EXIT_NETWORK,
    EXIT_SERVER_ERROR,
    EXIT_TIMEOUT,
    ErrorCategory,
    InvalidFormatFlag,
    NoProbesFound,
    ParseFailure,
    TransportError,
    ValidationError,
    categorize_error_type,
    categorize_exception,
    categorize_status,
    error_category_to_reason,
    exit_code_for,
    invalid_value_message,
    suggest,
)
from probeport.log import level_for_verbosity


def test_api_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("PROBEPORT_API_URL", "https://api.example.test/")
    monkeypatch.setenv("PROBEPORT_API_KEY", "se_test_key")
    monkeypatch.setenv("PROBEPORT_HTTP_TIMEOUT", "5.5")
    monkeypatch.setenv("PROBEPORT_HTTP_RETRIES", "4")
    monkeypatch.setenv("PROBEPORT_HTTP_BACKOFF", "1.5")
    monkeypatch.setenv("PROBEPORT_HTTP_INITIAL_DELAY", "0.1")
    monkeypatch.setenv("PROBEPORT_HTTP_VERIFY_SSL", "0")
    monkeypatch.setenv("PROBEPORT_USER_AGENT", "CustomAgent/1.0")
    monkeypatch.setenv("PROBEPORT_IMPORT_TIMEOUT", "300")
    monkeypatch.setenv("PROBEPORT_EXPORT_TIMEOUT", "15")
    monkeypatch.setenv("PROBEPORT_PAGE_SIZE", "25")

    settings = load_api_settings()

    assert settings.api_url == "https://api.example.test"
    assert settings.api_key == "se_test_key"
    assert settings.is_configured is True
    assert settings.timeout == 5.5
    assert settings.max_retries == 4
    assert settings.backoff_factor == 1.5
    assert settings.initial_delay == 0.1
    assert settings.verify_ssl is False
    assert settings.user_agent == "CustomAgent/1.0"
    assert settings.import_timeout == 300
    assert settings.export_timeout == 15
    assert settings.page_size == 25


def test_api_settings_invalid_env_fall_back(monkeypatch):
    monkeypatch.delenv("PROBEPORT_API_KEY", raising=False)
    monkeypatch.delenv("PROBEPORT_API_URL", raising=False)
    monkeypatch.delenv("PROBEPORT_USER_AGENT", raising=False)
    monkeypatch.setenv("PROBEPORT_HTTP_TIMEOUT", "not-a-number")
    monkeypatch.setenv("PROBEPORT_HTTP_RETRIES", "ten")
    monkeypatch.setenv("PROBEPORT_HTTP_BACKOFF", "")
    monkeypatch.setenv("PROBEPORT_PAGE_SIZE", "0")

    settings = ApiSettings.from_env()

    assert settings.api_url == DEFAULT_API_URL
    assert settings.api_key is None
    assert settings.is_configured is False
    assert settings.timeout == ApiSettings.timeout
    assert settings.max_retries == ApiSettings.max_retries
    assert settings.backoff_factor == ApiSettings.backoff_factor
    assert settings.page_size == 100
    assert settings.user_agent == DEFAULT_USER_AGENT


def test_blank_api_key_is_not_configured(monkeypatch):
    monkeypatch.setenv("PROBEPORT_API_KEY", "   ")
    assert load_api_settings().is_configured is False


def test_categorize_status_and_exit_codes():
    assert categorize_status(401) is ErrorCategory.AUTH
    assert categorize_status(403) is ErrorCategory.FORBIDDEN
    assert categorize_status(404) is ErrorCategory.NOT_FOUND
    assert categorize_status(429) is ErrorCategory.RATE_LIMITED
    assert categorize_status(503) is ErrorCategory.SERVER_ERROR
    assert categorize_status(422) is ErrorCategory.CLIENT_ERROR
    assert categorize_status(None) is ErrorCategory.UNKNOWN_ERROR

    assert exit_code_for(ErrorCategory.AUTH) == EXIT_AUTH
    assert exit_code_for(ErrorCategory.SERVER_ERROR) == EXIT_SERVER_ERROR
    assert exit_code_for(ErrorCategory.DNS_ERROR) == EXIT_NETWORK
    assert exit_code_for(ErrorCategory.TIMEOUT) == EXIT_TIMEOUT
    assert exit_code_for(ErrorCategory.CLIENT_ERROR) == 1
    assert exit_code_for(None) == 1


def test_categorize_exceptions_and_error_type_names():
    assert categorize_exception(httpx.ConnectTimeout("slow")) is ErrorCategory.TIMEOUT
    assert categorize_exception(httpx.ConnectError("refused")) is ErrorCategory.CONNECTION_ERROR
    assert categorize_exception(ConnectionResetError()) is ErrorCategory.CONNECTION_ERROR
    assert categorize_exception(RuntimeError("?")) is ErrorCategory.UNKNOWN_ERROR

    assert categorize_error_type("ReadTimeout") is ErrorCategory.TIMEOUT
    assert categorize_error_type("ConnectError") is ErrorCategory.CONNECTION_ERROR
    assert categorize_error_type("gaierror") is ErrorCategory.DNS_ERROR
    assert categorize_error_type("SSLCertVerificationError") is ErrorCategory.SSL_ERROR
    assert categorize_error_type(None) is ErrorCategory.UNKNOWN_ERROR
    assert error_category_to_reason(ErrorCategory.AUTH).startswith("Authentication failed")
    assert error_category_to_reason(None) == ""


def test_transport_error_wrap_keeps_category():
    original = TransportError("list probes: HTTP 401: invalid key", status_code=401, category=ErrorCategory.AUTH)
    wrapped = original.wrap("failed to list existing probes")

    assert str(wrapped) == "failed to list existing probes: list probes: HTTP 401: invalid key"
    assert wrapped.status_code == 401
    assert wrapped.exit_code == EXIT_AUTH
    assert wrapped.__cause__ is original


def test_validation_error_messages():
    named = ValidationError(2, "api", "url is required")
    unnamed = ValidationError(0, "", "name is required")

    assert str(named) == "probe 'api' (index 2): url is required"
    assert str(unnamed) == "probe at index 0: name is required"
    assert named.exit_code == EXIT_MISUSE
    assert (named.index, named.name, named.reason) == (2, "api", "url is required")


def test_configuration_errors_exit_with_misuse():
    failure = ParseFailure("yaml", "probes.yaml", "bad indent")
    assert failure.format == "yaml"
    assert "failed to parse YAML from 'probes.yaml'" in str(failure)
    assert NoProbesFound().exit_code == EXIT_MISUSE
    assert InvalidFormatFlag("xml").exit_code == EXIT_MISUSE


def test_suggestions():
    assert suggest("yml", ["yaml", "json"]) == "yaml"
    assert suggest("htp", ["http", "ping", "tcp", "dns_resolve"]) == "http"
    assert suggest("zzzz", ["yaml", "json"]) is None

    message = invalid_value_message("--format", "jsn", ["yaml", "json"])
    assert message.startswith("invalid value 'jsn' for --format: must be one of: yaml, json")
    assert message.endswith("Did you mean 'json'?")
    assert "Did you mean" not in invalid_value_message("--format", "xml", ["yaml", "json"])


def test_level_for_verbosity():
    assert level_for_verbosity(0) is None
    assert level_for_verbosity(1) == "INFO"
    assert level_for_verbosity(2) == "DEBUG"
    assert level_for_verbosity(5) == "DEBUG"
