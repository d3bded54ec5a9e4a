# models.py

from dataclasses import dataclass, field


class MalformedRequest(ValueError):
    """Raised when a request body can't be read as the expected message."""


# (wire name, attribute) in the order blocks are written out
BLOCK_FIELDS = (
    ("Index", "index"),
    ("Timestamp", "timestamp"),
    ("FileHash", "file_hash"),
    ("Event", "event"),
    ("EventTime", "event_time"),
    ("Location", "location"),
    ("Server", "server"),
    ("Hash", "hash"),
    ("PrevHash", "prev_hash"),
)

EVENT_FIELDS = (
    ("FileHash", "file_hash"),
    ("Event", "event"),
    ("EventTime", "event_time"),
    ("Location", "location"),
    ("Server", "server"),
)


@dataclass(frozen=True)
class Block:
    index: int
    timestamp: str
    file_hash: str
    event: str
    event_time: str
    location: str
    server: str
    prev_hash: str
    hash: str = ""

    def to_dict(self):
        return {wire: getattr(self, attr) for wire, attr in BLOCK_FIELDS}


def _lookup(payload, key):
    """Exact key first, then the first key matching case-insensitively."""
    if key in payload:
        return payload[key]
    for name, value in payload.items():
        if isinstance(name, str) and name.lower() == key.lower():
            return value
    return None


def _string_field(payload, key) -> str:
    value = _lookup(payload, key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise MalformedRequest(f"{key} must be a string")
    return value


def _require_object(payload, what):
    if not isinstance(payload, dict):
        raise MalformedRequest(f"{what} must be a JSON object")
    return payload


@dataclass(frozen=True)
class CreateBlockRequest:
    file_hash: str = ""
    event: str = ""
    event_time: str = ""
    location: str = ""
    server: str = ""

    @classmethod
    def from_json(cls, payload):
        payload = _require_object(payload, "Request body")
        return cls(**{attr: _string_field(payload, wire) for wire, attr in EVENT_FIELDS})

    def to_dict(self):
        return {wire: getattr(self, attr) for wire, attr in EVENT_FIELDS}


@dataclass(frozen=True)
class ValidationRequest:
    create_message: CreateBlockRequest = field(default_factory=CreateBlockRequest)
    hash: str = ""

    @classmethod
    def from_json(cls, payload):
        payload = _require_object(payload, "Request body")
        message = _lookup(payload, "CreateMessage")
        if message is None:
            create_message = CreateBlockRequest()
        else:
            create_message = CreateBlockRequest.from_json(_require_object(message, "CreateMessage"))
        return cls(create_message=create_message, hash=_string_field(payload, "Hash"))

    def to_dict(self):
        return {"CreateMessage": self.create_message.to_dict(), "Hash": self.hash}
