# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import uuid

import pytest

from probeport.errors import ErrorCategory, TransportError
from probeport.models import Probe, ProbePage
from probeport.portable.names import build_name_index, iter_probes


class PagedCollection:
    def __init__(self, count, *, fail_on_page=None):
        self.probes = [Probe(id=uuid.uuid4(), name=f"probe-{i}") for i in range(count)]
        self.fail_on_page = fail_on_page
        self.calls = []

    def list(self, page, limit, *, status=None, labels=None, deadline=None):  # noqa: ARG002
        self.calls.append({"page": page, "limit": limit, "status": status, "labels": labels})
        if page == self.fail_on_page:
            raise TransportError("list probes: HTTP 500: database unavailable", status_code=500, category=ErrorCategory.SERVER_ERROR)
        start = (page - 1) * limit
        return ProbePage(probes=self.probes[start : start + limit], total=len(self.probes), page=page, limit=limit)

    def create(self, request, *, deadline=None):  # pragma: no cover - not used
        raise AssertionError("create must not be called")

    def get(self, probe_id, *, deadline=None):  # pragma: no cover - not used
        raise AssertionError("get must not be called")


def test_index_walks_every_page():
    collection = PagedCollection(250)
    names = build_name_index(collection, page_size=100)

    assert len(names) == 250
    assert "probe-249" in names
    assert [call["page"] for call in collection.calls] == [1, 2, 3]
    assert all(call["limit"] == 100 for call in collection.calls)


def test_exact_multiple_needs_one_empty_page():
    collection = PagedCollection(200)
    assert len(build_name_index(collection, page_size=100)) == 200
    assert [call["page"] for call in collection.calls] == [1, 2, 3]


def test_empty_collection():
    collection = PagedCollection(0)
    assert build_name_index(collection) == set()
    assert len(collection.calls) == 1


def test_page_failure_aborts_without_partial_index():
    collection = PagedCollection(250, fail_on_page=2)
    with pytest.raises(TransportError) as excinfo:
        build_name_index(collection, page_size=100)

    assert str(excinfo.value) == "failed to list existing probes: list probes: HTTP 500: database unavailable"
    assert excinfo.value.category is ErrorCategory.SERVER_ERROR


def test_iter_probes_forwards_filters():
    collection = PagedCollection(3)
    probes = list(iter_probes(collection, page_size=2, status="down", labels={"env": "prod"}))

    assert [probe.name for probe in probes] == ["probe-0", "probe-1", "probe-2"]
    assert collection.calls[0]["status"] == "down"
    assert collection.calls[1]["labels"] == {"env": "prod"}
