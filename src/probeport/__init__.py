# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
probeport package entrypoint.

This package moves uptime-probe configurations between portable JSON/YAML
files and a hosted monitoring API. The remote collection is abstracted behind
an injectable protocol, HTTP behavior behind an injectable client interface,
and records are modeled with typed dataclasses.
"""

from .api import HttpProbeCollection, ProbeCollection
from .config import ApiSettings, load_api_settings
from .errors import (
    ConfigurationError,
    DeadlineExceeded,
    ProbePortError,
    TransportError,
    ValidationError,
)
from .http import (
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    RetryConfig,
    create_default_http_client,
)
from .log import setup_logging
from .models import CreateProbeRequest, ImportOutcome, PortableProbeConfig, Probe, ProbeLabel
from .portable import Format, ProbeExporter, ProbeImporter
from .utils import Deadline
from .version import __version__

__all__ = [
    "ApiSettings",
    "ConfigurationError",
    "CreateProbeRequest",
    "Deadline",
    "DeadlineExceeded",
    "Format",
    "HttpClient",
    "HttpProbeCollection",
    "HttpRequest",
    "HttpResponse",
    "HttpxClient",
    "ImportOutcome",
    "PortableProbeConfig",
    "Probe",
    "ProbeCollection",
    "ProbeExporter",
    "ProbeImporter",
    "ProbeLabel",
    "ProbePortError",
    "RetryConfig",
    "TransportError",
    "ValidationError",
    "create_default_http_client",
    "load_api_settings",
    "setup_logging",
    "__version__",
]
