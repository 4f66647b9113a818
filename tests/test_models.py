"""Tests for hub status and queue models."""
from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from grid_payloads import example_status_body, node, queue_body, session, slot, status_body
from models import (
    DecodeError,
    NodeSession,
    NodeSlot,
    QueueDocument,
    StatusDocument,
    decode_json,
)


def test_status_document_decode() -> None:
    doc = StatusDocument.decode(example_status_body())
    assert doc.ready is True
    assert doc.message == "Selenium Grid ready."
    assert [n.id for n in doc.nodes] == ["n-1", "n-2"]
    first = doc.nodes[0]
    assert first.max_sessions == 5
    assert first.heartbeat_period == 60000
    assert first.os_info.arch == "amd64"
    assert first.availability == "UP"
    assert first.slots[0].id.host_id == "host-1"
    assert first.slots[0].stereotype.browser_name == "chrome"
    assert first.slots[0].last_started == datetime(2024, 3, 1, 10, 15, 30, tzinfo=timezone.utc)


def test_slot_occupied_only_when_session_present() -> None:
    doc = StatusDocument.decode(example_status_body())
    assert [s.occupied for s in doc.nodes[0].slots] == [False, True]
    assert doc.nodes[0].slots[0].session is None
    assert isinstance(doc.nodes[0].slots[1].session, NodeSession)


def test_session_fields_and_opaque_capabilities() -> None:
    doc = StatusDocument.decode(example_status_body())
    s1 = doc.nodes[0].slots[1].session
    s2 = doc.nodes[1].slots[0].session
    assert s1.session_id == "s-1"
    assert s1.capabilities is None
    assert s1.stereotype["se:noVncPort"] == 7900
    assert s2.capabilities == {"acceptInsecureCerts": True}
    # Nanosecond precision is truncated to microseconds.
    assert s1.start == datetime(2024, 3, 1, 10, 15, 30, 123456, tzinfo=timezone.utc)


def test_absent_keys_and_nulls_take_zero_values() -> None:
    doc = StatusDocument.decode(b'{"value": {"nodes": [{"slots": [{}], "osInfo": null}]}}')
    assert doc.ready is False
    assert doc.message == ""
    assert doc.nodes[0].max_sessions == 0
    assert doc.nodes[0].os_info.name == ""
    assert doc.nodes[0].slots[0] == NodeSlot()


def test_missing_value_is_empty_document() -> None:
    assert StatusDocument.decode(b"{}") == StatusDocument()


def test_unknown_keys_ignored() -> None:
    body = json.dumps({"value": {"ready": True, "nodes": [], "extra": {"x": 1}}, "other": 2})
    assert StatusDocument.decode(body).ready is True


@pytest.mark.parametrize(
    "body",
    [
        b"",
        b"not json",
        b'{"value": {"ready": true',
        b"[1, 2]",
        b"null",
        b"\xff\xfe",
    ],
)
def test_malformed_body_raises(body: bytes) -> None:
    with pytest.raises(DecodeError):
        StatusDocument.decode(body)


@pytest.mark.parametrize(
    "value, path",
    [
        ({"ready": "yes"}, "value.ready"),
        ({"nodes": {}}, "value.nodes"),
        ({"nodes": [{"maxSessions": "5"}]}, "value.nodes[0].maxSessions"),
        ({"nodes": [{"maxSessions": 2.5}]}, "value.nodes[0].maxSessions"),
        ({"nodes": [{"maxSessions": True}]}, "value.nodes[0].maxSessions"),
        ({"nodes": [{"maxSessions": -1}]}, "value.nodes[0].maxSessions"),
        ({"nodes": [{}, {"slots": [{"session": "abc"}]}]}, "value.nodes[1].slots[0].session"),
        ({"nodes": [{"slots": [{"lastStarted": "yesterday"}]}]}, "value.nodes[0].slots[0].lastStarted"),
        ({"nodes": [{"slots": [{"session": {"capabilities": []}}]}]},
         "value.nodes[0].slots[0].session.capabilities"),
    ],
)
def test_schema_mismatch_names_field(value: dict, path: str) -> None:
    with pytest.raises(DecodeError) as exc:
        StatusDocument.decode(json.dumps({"value": value}))
    assert exc.value.path == path
    assert path in str(exc.value)


def test_decode_json_wraps_errors() -> None:
    assert decode_json(b'{"a": 1}') == {"a": 1}
    with pytest.raises(DecodeError) as exc:
        decode_json("{")
    assert "malformed JSON" in str(exc.value)
    assert isinstance(exc.value, ValueError)


def test_each_decode_builds_fresh_document() -> None:
    body = status_body([node(2, [slot(session())])])
    a = StatusDocument.decode(body)
    b = StatusDocument.decode(body)
    assert a == b
    assert a is not b
    assert a.nodes[0] is not b.nodes[0]


def test_status_document_to_dict() -> None:
    d = StatusDocument.decode(example_status_body()).to_dict()
    assert d["ready"] is True
    assert d["nodes"][0]["maxSessions"] == 5
    assert d["nodes"][0]["slots"][0]["session"] is None
    assert d["nodes"][1]["slots"][0]["session"]["capabilities"] == {"acceptInsecureCerts": True}
    json.dumps(d)


def test_queue_document_decode() -> None:
    doc = QueueDocument.decode(queue_body(["a", "b"], browser="firefox"))
    assert [e.request_id for e in doc.entries] == ["a", "b"]
    assert doc.entries[0].capabilities[0].browser_name == "firefox"
    assert doc.to_dict()["entries"][1]["requestId"] == "b"


def test_queue_document_empty_and_null() -> None:
    assert QueueDocument.decode(b'{"value": []}').entries == []
    assert QueueDocument.decode(b'{"value": null}').entries == []


@pytest.mark.parametrize(
    "body",
    [
        b'{"value": {"requestId": "a"}}',
        b'{"value": [{"requestId": 1}]}',
        b'{"value": [{"capabilities": {"browserName": "chrome"}}]}',
        b"[]",
        b"<html>",
    ],
)
def test_queue_document_rejects_bad_bodies(body: bytes) -> None:
    with pytest.raises(DecodeError):
        QueueDocument.decode(body)


def test_deeply_nested_json_raises_decode_error() -> None:
    with pytest.raises(DecodeError):
        decode_json(b"[" * 100000 + b"]" * 100000)
