"""
Data models for the Selenium Grid exporter: hub status document (nodes, slots,
sessions) and new-session queue document, decoded from the hub's JSON.

Decoding follows the hub's schema loosely: absent keys and nulls fall back to
zero values, unknown keys are ignored, and a present key of the wrong JSON type
raises DecodeError. Capability and stereotype bags are kept as opaque dicts.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from utils import format_timestamp, parse_timestamp


class DecodeError(ValueError):
    """Body is not valid JSON or does not match the expected schema."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}" if path else reason)


# -----------------------------------------------------------------------------
# Field decoders
# -----------------------------------------------------------------------------

def _type_name(raw: Any) -> str:
    if isinstance(raw, bool):
        return "boolean"
    if isinstance(raw, (int, float)):
        return "number"
    if isinstance(raw, str):
        return "string"
    if isinstance(raw, list):
        return "array"
    if isinstance(raw, dict):
        return "object"
    return type(raw).__name__


def _object(raw: Any, path: str) -> dict[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise DecodeError(path, f"expected object, got {_type_name(raw)}")
    return raw


def _array(raw: Any, path: str) -> list[Any]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise DecodeError(path, f"expected array, got {_type_name(raw)}")
    return raw


def _string(raw: Any, path: str) -> str:
    if raw is None:
        return ""
    if not isinstance(raw, str):
        raise DecodeError(path, f"expected string, got {_type_name(raw)}")
    return raw


def _boolean(raw: Any, path: str) -> bool:
    if raw is None:
        return False
    if not isinstance(raw, bool):
        raise DecodeError(path, f"expected boolean, got {_type_name(raw)}")
    return raw


def _count(raw: Any, path: str) -> int:
    """Non-negative integer; JSON booleans and fractional numbers are rejected."""
    if raw is None:
        return 0
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise DecodeError(path, f"expected integer, got {_type_name(raw)}")
    if raw < 0:
        raise DecodeError(path, f"expected non-negative integer, got {raw}")
    return raw


def _timestamp(raw: Any, path: str) -> datetime | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise DecodeError(path, f"expected timestamp string, got {_type_name(raw)}")
    try:
        return parse_timestamp(raw)
    except ValueError:
        raise DecodeError(path, f"invalid timestamp {raw!r}") from None


def _mapping(raw: Any, path: str) -> dict[str, Any] | None:
    """Opaque pass-through object; None stays None."""
    if raw is None:
        return None
    return dict(_object(raw, path))


def decode_json(body: bytes | str) -> Any:
    """Parse a response body, raising DecodeError on malformed JSON."""
    try:
        return json.loads(body)
    except (ValueError, RecursionError) as e:
        raise DecodeError("", f"malformed JSON: {e}") from None


def _envelope(body: bytes | str) -> Any:
    payload = decode_json(body)
    if not isinstance(payload, dict):
        raise DecodeError("", f"expected object envelope, got {_type_name(payload)}")
    return payload.get("value")


# -----------------------------------------------------------------------------
# Hub status
# -----------------------------------------------------------------------------

@dataclass
class OsInfo:
    arch: str = ""
    name: str = ""
    version: str = ""

    @classmethod
    def from_dict(cls, raw: Any, path: str) -> OsInfo:
        d = _object(raw, path)
        return cls(
            arch=_string(d.get("arch"), f"{path}.arch"),
            name=_string(d.get("name"), f"{path}.name"),
            version=_string(d.get("version"), f"{path}.version"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"arch": self.arch, "name": self.name, "version": self.version}


@dataclass
class SlotId:
    host_id: str = ""
    id: str = ""

    @classmethod
    def from_dict(cls, raw: Any, path: str) -> SlotId:
        d = _object(raw, path)
        return cls(
            host_id=_string(d.get("hostId"), f"{path}.hostId"),
            id=_string(d.get("id"), f"{path}.id"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"hostId": self.host_id, "id": self.id}


@dataclass
class SlotStereotype:
    """Browser/platform a slot is able to serve."""
    browser_name: str = ""
    platform_name: str = ""

    @classmethod
    def from_dict(cls, raw: Any, path: str) -> SlotStereotype:
        d = _object(raw, path)
        return cls(
            browser_name=_string(d.get("browserName"), f"{path}.browserName"),
            platform_name=_string(d.get("platformName"), f"{path}.platformName"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"browserName": self.browser_name, "platformName": self.platform_name}


@dataclass
class NodeSession:
    """Active browser session occupying a slot."""
    session_id: str = ""
    start: datetime | None = None
    uri: str = ""
    stereotype: dict[str, Any] = field(default_factory=dict)
    capabilities: dict[str, Any] | None = None  # opaque, never interpreted

    @classmethod
    def from_dict(cls, raw: Any, path: str) -> NodeSession:
        d = _object(raw, path)
        return cls(
            session_id=_string(d.get("sessionId"), f"{path}.sessionId"),
            start=_timestamp(d.get("start"), f"{path}.start"),
            uri=_string(d.get("uri"), f"{path}.uri"),
            stereotype=_mapping(d.get("stereotype"), f"{path}.stereotype") or {},
            capabilities=_mapping(d.get("capabilities"), f"{path}.capabilities"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "start": format_timestamp(self.start),
            "uri": self.uri,
            "stereotype": dict(self.stereotype),
            "capabilities": dict(self.capabilities) if self.capabilities is not None else None,
        }


@dataclass
class NodeSlot:
    """Unit of capacity on a node; occupied iff session is present."""
    id: SlotId = field(default_factory=SlotId)
    last_started: datetime | None = None
    stereotype: SlotStereotype = field(default_factory=SlotStereotype)
    session: NodeSession | None = None

    @property
    def occupied(self) -> bool:
        return self.session is not None

    @classmethod
    def from_dict(cls, raw: Any, path: str) -> NodeSlot:
        d = _object(raw, path)
        session_raw = d.get("session")
        return cls(
            id=SlotId.from_dict(d.get("id"), f"{path}.id"),
            last_started=_timestamp(d.get("lastStarted"), f"{path}.lastStarted"),
            stereotype=SlotStereotype.from_dict(d.get("stereotype"), f"{path}.stereotype"),
            session=NodeSession.from_dict(session_raw, f"{path}.session") if session_raw is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id.to_dict(),
            "lastStarted": format_timestamp(self.last_started),
            "stereotype": self.stereotype.to_dict(),
            "session": self.session.to_dict() if self.session is not None else None,
        }


@dataclass
class NodeStatus:
    """Worker machine registered with the hub."""
    id: str = ""
    uri: str = ""
    version: str = ""
    availability: str = ""
    max_sessions: int = 0
    os_info: OsInfo = field(default_factory=OsInfo)
    heartbeat_period: int = 0
    slots: list[NodeSlot] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Any, path: str) -> NodeStatus:
        d = _object(raw, path)
        return cls(
            id=_string(d.get("id"), f"{path}.id"),
            uri=_string(d.get("uri"), f"{path}.uri"),
            version=_string(d.get("version"), f"{path}.version"),
            availability=_string(d.get("availability"), f"{path}.availability"),
            max_sessions=_count(d.get("maxSessions"), f"{path}.maxSessions"),
            os_info=OsInfo.from_dict(d.get("osInfo"), f"{path}.osInfo"),
            heartbeat_period=_count(d.get("heartbeatPeriod"), f"{path}.heartbeatPeriod"),
            slots=[
                NodeSlot.from_dict(s, f"{path}.slots[{i}]")
                for i, s in enumerate(_array(d.get("slots"), f"{path}.slots"))
            ],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "uri": self.uri,
            "version": self.version,
            "availability": self.availability,
            "maxSessions": self.max_sessions,
            "osInfo": self.os_info.to_dict(),
            "heartbeatPeriod": self.heartbeat_period,
            "slots": [s.to_dict() for s in self.slots],
        }


@dataclass
class StatusDocument:
    """Hub's self-reported state, as served by GET /status."""
    ready: bool = False
    message: str = ""
    nodes: list[NodeStatus] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Any, path: str = "value") -> StatusDocument:
        d = _object(raw, path)
        return cls(
            ready=_boolean(d.get("ready"), f"{path}.ready"),
            message=_string(d.get("message"), f"{path}.message"),
            nodes=[
                NodeStatus.from_dict(n, f"{path}.nodes[{i}]")
                for i, n in enumerate(_array(d.get("nodes"), f"{path}.nodes"))
            ],
        )

    @classmethod
    def decode(cls, body: bytes | str) -> StatusDocument:
        """Decode a {"value": {...}} response body into a new document."""
        return cls.from_dict(_envelope(body))

    def to_dict(self) -> dict[str, Any]:
        return {
            "ready": self.ready,
            "message": self.message,
            "nodes": [n.to_dict() for n in self.nodes],
        }


# -----------------------------------------------------------------------------
# New-session queue
# -----------------------------------------------------------------------------

@dataclass
class QueueCapability:
    browser_name: str = ""

    @classmethod
    def from_dict(cls, raw: Any, path: str) -> QueueCapability:
        d = _object(raw, path)
        return cls(browser_name=_string(d.get("browserName"), f"{path}.browserName"))

    def to_dict(self) -> dict[str, Any]:
        return {"browserName": self.browser_name}


@dataclass
class QueueEntry:
    """Pending session request not yet matched to a slot."""
    request_id: str = ""
    capabilities: list[QueueCapability] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Any, path: str) -> QueueEntry:
        d = _object(raw, path)
        return cls(
            request_id=_string(d.get("requestId"), f"{path}.requestId"),
            capabilities=[
                QueueCapability.from_dict(c, f"{path}.capabilities[{i}]")
                for i, c in enumerate(_array(d.get("capabilities"), f"{path}.capabilities"))
            ],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "requestId": self.request_id,
            "capabilities": [c.to_dict() for c in self.capabilities],
        }


@dataclass
class QueueDocument:
    entries: list[QueueEntry] = field(default_factory=list)

    @classmethod
    def from_list(cls, raw: Any, path: str = "value") -> QueueDocument:
        return cls(entries=[
            QueueEntry.from_dict(e, f"{path}[{i}]")
            for i, e in enumerate(_array(raw, path))
        ])

    @classmethod
    def decode(cls, body: bytes | str) -> QueueDocument:
        """Decode a {"value": [...]} response body into a new document."""
        return cls.from_list(_envelope(body))

    def to_dict(self) -> dict[str, Any]:
        return {"entries": [e.to_dict() for e in self.entries]}
