# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for probeport."""

from .outcome import ImportOutcome
from .portable import CHECK_TYPES, HTTP_METHODS, KEYWORD_CHECK_TYPES, PortableProbeConfig, ProbeLabel
from .presence import ABSENT, Maybe
from .wire import CreateProbeRequest, Probe, ProbePage

__all__ = [
    "ABSENT",
    "CHECK_TYPES",
    "CreateProbeRequest",
    "HTTP_METHODS",
    "ImportOutcome",
    "KEYWORD_CHECK_TYPES",
    "Maybe",
    "PortableProbeConfig",
    "Probe",
    "ProbeLabel",
    "ProbePage",
]
