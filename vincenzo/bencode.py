"""Bencode encoding and decoding.

Integers become ``int``, strings become ``bytes``, lists become ``list`` and
dictionaries become ``dict`` with ``bytes`` keys, in the order they were read.
``str`` values and keys are encoded as UTF-8 when encoding.
"""

from __future__ import annotations

from typing import Any, Union

__all__ = ["BencodeError", "encode", "decode", "decode_prefix"]

Bencodable = Union[int, bytes, bytearray, memoryview, str, list, tuple, dict]

_MAX_DEPTH = 256
_DIGITS = b"0123456789"


class BencodeError(ValueError):
    """Raised when data cannot be encoded to or decoded from bencode."""


def _as_key(key: Any) -> bytes:
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, (bytes, bytearray, memoryview)):
        return bytes(key)
    raise BencodeError(f"dictionary key must be str or bytes, not {type(key).__name__}")


def _encode_into(value: Any, out: list[bytes], depth: int) -> None:
    if depth > _MAX_DEPTH:
        raise BencodeError("value is nested too deeply")
    if isinstance(value, bool):
        raise BencodeError("booleans have no bencode representation")
    if isinstance(value, int):
        out.append(b"i%de" % value)
    elif isinstance(value, str):
        raw = value.encode("utf-8")
        out.append(b"%d:" % len(raw))
        out.append(raw)
    elif isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
        out.append(b"%d:" % len(raw))
        out.append(raw)
    elif isinstance(value, (list, tuple)):
        out.append(b"l")
        for item in value:
            _encode_into(item, out, depth + 1)
        out.append(b"e")
    elif isinstance(value, dict):
        items = [(_as_key(k), v) for k, v in value.items()]
        items.sort(key=lambda pair: pair[0])
        keys = [k for k, _ in items]
        if len(set(keys)) != len(keys):
            raise BencodeError("dictionary has duplicate keys")
        out.append(b"d")
        for key, item in items:
            out.append(b"%d:" % len(key))
            out.append(key)
            _encode_into(item, out, depth + 1)
        out.append(b"e")
    else:
        raise BencodeError(f"cannot bencode value of type {type(value).__name__}")


def encode(value: Bencodable) -> bytes:
    """Encode a value to bencode; dictionary keys are emitted in sorted order."""
    out: list[bytes] = []
    _encode_into(value, out, 0)
    return b"".join(out)


class _Decoder:
    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0

    def _peek(self) -> int:
        if self.pos >= len(self.data):
            raise BencodeError("unexpected end of data")
        return self.data[self.pos]

    def _read_integer(self, terminator: bytes) -> int:
        end = self.data.find(terminator, self.pos)
        if end < 0:
            raise BencodeError("unterminated integer")
        text = self.data[self.pos:end]
        digits = text[1:] if text.startswith(b"-") else text
        if not digits or any(c not in _DIGITS for c in digits):
            raise BencodeError(f"invalid integer {text!r}")
        if len(digits) > 1 and digits.startswith(b"0"):
            raise BencodeError(f"integer with leading zero {text!r}")
        if text == b"-0":
            raise BencodeError("negative zero is not allowed")
        self.pos = end + 1
        return int(text)

    def _read_bytes(self) -> bytes:
        if text_start := self.data[self.pos:self.pos + 1]:
            if text_start == b"-":
                raise BencodeError("negative string length")
        length = self._read_integer(b":")
        end = self.pos + length
        if end > len(self.data):
            raise BencodeError("string runs past end of data")
        raw = self.data[self.pos:end]
        self.pos = end
        return raw

    def read(self, depth: int = 0) -> Any:
        if depth > _MAX_DEPTH:
            raise BencodeError("data is nested too deeply")
        lead = self._peek()
        if lead == ord("i"):
            self.pos += 1
            return self._read_integer(b"e")
        if lead == ord("l"):
            self.pos += 1
            items = []
            while self._peek() != ord("e"):
                items.append(self.read(depth + 1))
            self.pos += 1
            return items
        if lead == ord("d"):
            self.pos += 1
            result: dict[bytes, Any] = {}
            while self._peek() != ord("e"):
                if self._peek() not in _DIGITS:
                    raise BencodeError("dictionary key must be a string")
                key = self._read_bytes()
                if key in result:
                    raise BencodeError(f"duplicate dictionary key {key!r}")
                result[key] = self.read(depth + 1)
            self.pos += 1
            return result
        if lead in _DIGITS:
            return self._read_bytes()
        raise BencodeError(f"unexpected byte {bytes([lead])!r} at offset {self.pos}")


def decode_prefix(data: bytes) -> tuple[Any, int]:
    """Decode the first bencoded value in ``data``.

    Returns the value and the number of bytes it occupied; anything after it
    is left alone.
    """
    decoder = _Decoder(bytes(data))
    value = decoder.read()
    return value, decoder.pos


def decode(data: bytes) -> Any:
    """Decode a complete bencoded value; trailing bytes are an error."""
    value, consumed = decode_prefix(data)
    if consumed != len(data):
        raise BencodeError(f"{len(data) - consumed} trailing bytes after value")
    return value