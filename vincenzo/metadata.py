"""Messages of the metadata exchange extension (BEP 9)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from vincenzo.bencode import BencodeError, decode, encode

__all__ = ["Metadata"]

_U8_MAX = 2**8 - 1
_U32_MAX = 2**32 - 1

_DICT_END = b"ee"


def _as_uint(value: Any, what: str, maximum: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise BencodeError(f"{what}: expected an integer")
    if not 0 <= value <= maximum:
        raise BencodeError(f"{what}: integer {value} out of range")
    return value


@dataclass
class Metadata:
    """A metadata message used to request, send or reject a piece of the info.

    ``msg_type`` is 0 for a request, 1 for data and 2 for a rejection.
    """

    msg_type: int = 0
    piece: int = 0
    total_size: Optional[int] = None

    @classmethod
    def request(cls, piece: int) -> Metadata:
        """A request for the given piece of the info dictionary."""
        return cls(msg_type=0, piece=piece, total_size=None)

    @classmethod
    def data(cls, piece: int, info: bytes) -> bytes:
        """A data message for ``piece`` followed by the raw ``info`` bytes."""
        header = cls(msg_type=1, piece=piece, total_size=len(info))
        return header.to_bencode() + bytes(info)

    @classmethod
    def reject(cls, piece: int) -> Metadata:
        """A rejection of a request for the given piece."""
        return cls(msg_type=2, piece=piece, total_size=None)

    @classmethod
    def extract(cls, buf: bytes) -> tuple[Metadata, bytes]:
        """Split a data message into its header and the info bytes after it.

        The header dictionary ends at the first ``ee`` in the buffer.
        Raises :class:`BencodeError` if no valid header is found.
        """
        raw = bytes(buf)
        end = raw.find(_DICT_END)
        if end < 0:
            header, rest = b"", raw
        else:
            header, rest = raw[: end + len(_DICT_END)], raw[end + len(_DICT_END):]
        return cls.from_bencode(header), rest

    def to_bencode(self) -> bytes:
        value: dict[str, Any] = {"msg_type": self.msg_type, "piece": self.piece}
        if self.total_size is not None:
            value["total_size"] = self.total_size
        return encode(value)

    @classmethod
    def from_bencode(cls, data: bytes) -> Metadata:
        entries = decode(data)
        if not isinstance(entries, dict):
            raise BencodeError("metadata: expected a dictionary")
        msg_type = 0
        piece = 0
        total_size = None
        if b"msg_type" in entries:
            msg_type = _as_uint(entries[b"msg_type"], "msg_type", _U8_MAX)
        if b"piece" in entries:
            piece = _as_uint(entries[b"piece"], "piece", _U32_MAX)
        if b"total_size" in entries:
            total_size = _as_uint(entries[b"total_size"], "total_size", _U32_MAX)
        return cls(msg_type=msg_type, piece=piece, total_size=total_size)