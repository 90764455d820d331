"""Handshake payload of the extension protocol (BEP 10)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from vincenzo.bencode import BencodeError, decode, encode

__all__ = ["M", "Extension"]

_U8_MAX = 2**8 - 1
_U16_MAX = 2**16 - 1
_U32_MAX = 2**32 - 1

CLIENT_VERSION = "Vincenzo 0.0.1"
"""Client name and version announced in the extension handshake."""


def _as_dict(value: Any, what: str) -> dict:
    if not isinstance(value, dict):
        raise BencodeError(f"{what}: expected a dictionary")
    return value


def _as_uint(value: Any, what: str, maximum: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise BencodeError(f"{what}: expected an integer")
    if not 0 <= value <= maximum:
        raise BencodeError(f"{what}: integer {value} out of range")
    return value


def _as_str(value: Any, what: str) -> str:
    if not isinstance(value, (bytes, bytearray)):
        raise BencodeError(f"{what}: expected a byte string")
    try:
        return bytes(value).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise BencodeError(f"{what}: invalid UTF-8") from exc


@dataclass
class M:
    """The ``m`` dictionary: extension names mapped to their message ids."""

    ut_metadata: Optional[int] = None
    ut_pex: Optional[int] = None

    def _to_value(self) -> dict:
        value: dict[str, Any] = {}
        if self.ut_metadata is not None:
            value["ut_metadata"] = self.ut_metadata
        if self.ut_pex is not None:
            value["ut_pex"] = self.ut_pex
        return value

    def to_bencode(self) -> bytes:
        return encode(self._to_value())

    @classmethod
    def _from_value(cls, value: Any) -> M:
        entries = _as_dict(value, "m")
        ut_metadata = None
        ut_pex = None
        if b"ut_metadata" in entries:
            ut_metadata = _as_uint(entries[b"ut_metadata"], "ut_metadata", _U8_MAX)
        if b"ut_pex" in entries:
            ut_pex = _as_uint(entries[b"ut_pex"], "ut_pex", _U8_MAX)
        return cls(ut_metadata=ut_metadata, ut_pex=ut_pex)

    @classmethod
    def from_bencode(cls, data: bytes) -> M:
        return cls._from_value(decode(data))


@dataclass
class Extension:
    """Extension handshake: supported extensions and optional client details."""

    m: M = field(default_factory=M)
    p: Optional[int] = None
    v: Optional[str] = None
    reqq: Optional[int] = None
    metadata_size: Optional[int] = None

    @classmethod
    def supported(cls, metadata_size: Optional[int]) -> Extension:
        """The handshake describing the extensions this client supports."""
        return cls(
            m=M(ut_metadata=3, ut_pex=None),
            p=None,
            v=CLIENT_VERSION,
            reqq=6,
            metadata_size=metadata_size,
        )

    def _to_value(self) -> dict:
        value: dict[str, Any] = {"m": self.m._to_value()}
        if self.metadata_size is not None:
            value["metadata_size"] = self.metadata_size
        if self.p is not None:
            value["p"] = self.p
        if self.reqq is not None:
            value["reqq"] = self.reqq
        if self.v is not None:
            value["v"] = self.v
        return value

    def to_bencode(self) -> bytes:
        return encode(self._to_value())

    @classmethod
    def from_bencode(cls, data: bytes) -> Extension:
        entries = _as_dict(decode(data), "extension")
        m = M()
        p = None
        v = None
        reqq = None
        metadata_size = None
        if b"m" in entries:
            m = M._from_value(entries[b"m"])
        if b"metadata_size" in entries:
            metadata_size = _as_uint(entries[b"metadata_size"], "metadata_size", _U32_MAX)
        if b"p" in entries:
            p = _as_uint(entries[b"p"], "p", _U16_MAX)
        if b"reqq" in entries:
            reqq = _as_uint(entries[b"reqq"], "reqq", _U16_MAX)
        if b"v" in entries:
            v = _as_str(entries[b"v"], "v")
        return cls(m=m, p=p, v=v, reqq=reqq, metadata_size=metadata_size)