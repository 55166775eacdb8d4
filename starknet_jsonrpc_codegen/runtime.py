"""
Runtime support for generated Starknet JSON-RPC types.

Generated modules serialize with dataclasses_json. This module provides the
domain codecs their fields plug into `config(encoder=..., decoder=...)`:
hex field elements, hex numbers, base64 blobs and shared payloads, plus the
errors raised while decoding.
"""

from __future__ import annotations

import base64
import binascii
import re
from collections.abc import Callable
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")

FieldElement = int
EthAddress = str

# Prime of the Starknet field
FIELD_PRIME = 2**251 + 17 * 2**192 + 1

_HEX_PATTERN = re.compile(r"0x[0-9a-fA-F]+")

# Key of the single field of the element shadows of positional payloads
ELEMENT_KEY = "value"


class DecodeError(ValueError):
    """A JSON value does not match the expected wire shape."""


class JsonRpcError(Exception):
    """A JSON-RPC error carrying its code and message."""

    def __init__(self, code: int, message: str, variant: Enum | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.variant = variant

    def __repr__(self) -> str:
        return f"JsonRpcError(code={self.code}, message={self.message!r})"


def _describe(data: Any) -> str:
    if data is None:
        return "null"
    if isinstance(data, bool):
        return "boolean"
    if isinstance(data, (int, float)):
        return "number"
    if isinstance(data, str):
        return "string"
    if isinstance(data, list):
        return "array"
    if isinstance(data, dict):
        return "object"
    return type(data).__name__


def _parse_hex(data: Any) -> int:
    if not isinstance(data, str) or not _HEX_PATTERN.fullmatch(data):
        raise DecodeError(f"expected hex string, got {data!r}")
    return int(data, 16)


class Codec:
    """Converts a field value to and from its JSON representation."""

    def encode(self, value: Any) -> Any:
        raise NotImplementedError

    def decode(self, data: Any) -> Any:
        raise NotImplementedError


class _UfeHex(Codec):
    """Field element as a 0x-prefixed hex string."""

    def encode(self, value: int) -> str:
        return hex(value)

    def decode(self, data: Any) -> int:
        value = _parse_hex(data)
        if value >= FIELD_PRIME:
            raise DecodeError(f"field element out of range: {data}")
        return value

    def __repr__(self) -> str:
        return "UfeHex"


class _NumAsHex(Codec):
    """Unsigned number as a 0x-prefixed hex string. Plain numbers are accepted on decode."""

    def encode(self, value: int) -> str:
        return hex(value)

    def decode(self, data: Any) -> int:
        if isinstance(data, int) and not isinstance(data, bool):
            if data < 0:
                raise DecodeError(f"expected unsigned number, got {data}")
            return data
        return _parse_hex(data)

    def __repr__(self) -> str:
        return "NumAsHex"


class _Base64(Codec):
    """Byte blob as a base64 string."""

    def encode(self, value: bytes) -> str:
        return base64.b64encode(value).decode("ascii")

    def decode(self, data: Any) -> bytes:
        if not isinstance(data, str):
            raise DecodeError(f"expected base64 string, got {_describe(data)}")
        try:
            return base64.b64decode(data, validate=True)
        except binascii.Error as e:
            raise DecodeError(f"invalid base64 string: {e}") from e

    def __repr__(self) -> str:
        return "Base64"


UfeHex = _UfeHex()
NumAsHex = _NumAsHex()
Base64 = _Base64()


class SeqOf(Codec):
    """Applies a codec to every element of a list."""

    def __init__(self, inner: Codec):
        self.inner = inner

    def encode(self, value: list) -> list:
        return [self.inner.encode(item) for item in value]

    def decode(self, data: Any) -> list:
        if not isinstance(data, list):
            raise DecodeError(f"expected array, got {_describe(data)}")
        return [self.inner.decode(item) for item in data]

    def __repr__(self) -> str:
        return f"SeqOf({self.inner!r})"


class OptionOf(Codec):
    """Applies a codec to a value that may be null."""

    def __init__(self, inner: Codec):
        self.inner = inner

    def encode(self, value: Any) -> Any:
        return None if value is None else self.inner.encode(value)

    def decode(self, data: Any) -> Any:
        return None if data is None else self.inner.decode(data)

    def __repr__(self) -> str:
        return f"OptionOf({self.inner!r})"


class Nested(Codec):
    """
    Defers to the `to_dict`/`from_dict` of a generated type.

    The type is looked up on first use so that fields may name types
    defined further down the module.
    """

    def __init__(self, resolve: Callable[[], type]):
        self.resolve = resolve

    def encode(self, value: Any) -> Any:
        return value.to_dict()

    def decode(self, data: Any) -> Any:
        return self.resolve().from_dict(data)

    def __repr__(self) -> str:
        return f"Nested({self.resolve().__name__})"


class Shared(Generic[T]):
    """
    A value shared between several owners.

    Copies, deep ones included, return the same wrapper so the payload is
    never duplicated.
    """

    __slots__ = ("value",)

    def __init__(self, value: T):
        self.value = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shared):
            return NotImplemented
        return self.value == other.value

    __hash__ = None  # type: ignore[assignment]

    def __copy__(self) -> Shared[T]:
        return self

    def __deepcopy__(self, memo: dict) -> Shared[T]:
        return self

    def __repr__(self) -> str:
        return f"Shared({self.value!r})"


class SharedOf(Codec):
    """Encodes the payload of a `Shared` wrapper, wraps decoded payloads."""

    def __init__(self, inner: Codec | None = None):
        self.inner = inner

    def encode(self, value: Shared) -> Any:
        if self.inner is None:
            return value.value
        return self.inner.encode(value.value)

    def decode(self, data: Any) -> Shared:
        if self.inner is None:
            return Shared(data)
        return Shared(self.inner.decode(data))

    def __repr__(self) -> str:
        return f"SharedOf({self.inner!r})" if self.inner is not None else "SharedOf()"


def pop_element(elements: list, shadow: type) -> Any:
    """
    Remove the last element of a positional payload and decode it.

    Args:
        elements: Remaining elements, consumed from the end
        shadow: Single-field dataclass_json class whose field decodes the element
    """
    if not elements:
        raise DecodeError("invalid sequence length")

    element = elements.pop()
    try:
        return getattr(shadow.from_dict({ELEMENT_KEY: element}), ELEMENT_KEY)
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeError(f"failed to parse element: {e}") from e
