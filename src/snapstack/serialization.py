# pyright: standard

from typing import Any

import msgspec


def to_json(obj: object) -> bytes:
    """Encode an object to JSON bytes using msgspec."""
    return msgspec.json.encode(obj)


def from_json[T](type_spec: type[T], data: bytes | str) -> T:
    """Decode JSON data (bytes or str) into the specified type."""
    return msgspec.json.decode(data, type=type_spec)


def clone(obj: Any) -> Any:
    """
    Returns a structurally independent copy of a JSON-compatible value.

    The copy goes through a JSON encode/decode pass, so tuples come back as lists
    and anything msgspec cannot encode raises ``msgspec.EncodeError`` or ``TypeError``.
    """
    return msgspec.json.decode(msgspec.json.encode(obj))

