# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Remote API exports."""

from .probes import PROBES_PATH, HttpProbeCollection, ProbeCollection, format_label_filters

__all__ = ["PROBES_PATH", "HttpProbeCollection", "ProbeCollection", "format_label_filters"]
