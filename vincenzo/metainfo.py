"""Torrent metainfo: the contents of a ``.torrent`` file and its info dictionary."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from vincenzo.bencode import BencodeError, decode, encode

__all__ = ["BLOCK_LEN", "BlockInfo", "File", "Info", "MetaInfo"]

logger = logging.getLogger(__name__)

BLOCK_LEN = 16384
"""Size in bytes of a regular block requested from peers."""

_U32_MAX = 2**32 - 1


def _as_dict(value: Any, what: str) -> dict:
    if not isinstance(value, dict):
        raise BencodeError(f"{what}: expected a dictionary")
    return value


def _as_uint(value: Any, what: str, maximum: int = _U32_MAX) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise BencodeError(f"{what}: expected an integer")
    if not 0 <= value <= maximum:
        raise BencodeError(f"{what}: integer {value} out of range")
    return value


def _as_bytes(value: Any, what: str) -> bytes:
    if not isinstance(value, (bytes, bytearray)):
        raise BencodeError(f"{what}: expected a byte string")
    return bytes(value)


def _as_str(value: Any, what: str) -> str:
    raw = _as_bytes(value, what)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise BencodeError(f"{what}: invalid UTF-8") from exc


def _as_str_list(value: Any, what: str) -> list[str]:
    if not isinstance(value, list):
        raise BencodeError(f"{what}: expected a list")
    return [_as_str(item, what) for item in value]


@dataclass(frozen=True)
class BlockInfo:
    """A block of a piece: piece index, offset inside the piece, and length."""

    index: int
    begin: int
    length: int


@dataclass
class File:
    """A file of a multi-file torrent; ``path`` excludes the root directory name."""

    length: int = 0
    path: list[str] = field(default_factory=list)

    def get_piece_len(self, piece: int, piece_length: int) -> int:
        """Length in bytes of the given piece within this file."""
        if piece * piece_length + piece_length <= self.length:
            return piece_length
        return self.length % piece_length

    def pieces(self, piece_length: int) -> int:
        """Number of pieces this file spans, rounded up."""
        return -(-self.length // piece_length)

    def _to_value(self) -> dict:
        return {"length": self.length, "path": list(self.path)}

    def to_bencode(self) -> bytes:
        return encode(self._to_value())

    @classmethod
    def _from_value(cls, value: Any) -> File:
        entries = _as_dict(value, "file")
        length = 0
        path: list[str] = []
        if b"length" in entries:
            length = _as_uint(entries[b"length"], "length")
        if b"path" in entries:
            path = _as_str_list(entries[b"path"], "path")
        return cls(length=length, path=path)

    @classmethod
    def from_bencode(cls, data: bytes) -> File:
        return cls._from_value(decode(data))


@dataclass
class Info:
    """The info dictionary of a torrent.

    ``file_length`` is set for single-file torrents, ``files`` for multi-file
    torrents, in which case ``name`` is the root directory.
    """

    piece_length: int = 0
    pieces: bytes = b""
    name: str = ""
    file_length: Optional[int] = None
    files: Optional[list[File]] = None

    def with_name(self, name: str) -> Info:
        """Return a copy of this info with another name."""
        return replace(self, name=name)

    def piece_count(self) -> int:
        """Number of pieces, one per 20-byte SHA1 hash."""
        return len(self.pieces) // 20

    def blocks_len(self) -> int:
        """Number of full-size blocks across all pieces."""
        return self.blocks_per_piece() * self.piece_count()

    def blocks_per_piece(self) -> int:
        return self.piece_length // BLOCK_LEN

    def get_block_infos(self) -> list[BlockInfo]:
        """Every block of the torrent, split at piece and file boundaries."""
        total_size = self.get_size()
        blocks: list[BlockInfo] = []
        processed = 0
        offset_in_file = 0
        file_index = 0

        while processed < total_size:
            if self.files is None:
                remaining_in_file = total_size - processed
            else:
                remaining_in_file = self.files[file_index].length - offset_in_file
            length = min(
                remaining_in_file,
                self.piece_length - processed % self.piece_length,
                BLOCK_LEN,
            )
            blocks.append(
                BlockInfo(
                    index=processed // self.piece_length,
                    begin=processed % self.piece_length,
                    length=length,
                )
            )
            processed += length
            offset_in_file += length

            if self.files is not None:
                while (
                    file_index < len(self.files)
                    and offset_in_file >= self.files[file_index].length
                ):
                    offset_in_file -= self.files[file_index].length
                    file_index += 1

        return blocks

    def get_size(self) -> int:
        """Total size of the torrent in bytes."""
        if self.files is not None:
            return sum(f.length for f in self.files)
        if self.file_length is not None:
            return self.file_length
        logger.warning("tried to get the size of a malformed info: %r", self)
        return 0

    def piece_size(self, piece_index: int) -> int:
        """Size in bytes of the given piece; the last one may be shorter."""
        if piece_index == self.piece_count() - 1:
            remainder = self.get_size() % self.piece_length
            return remainder or self.piece_length
        return self.piece_length

    def _to_value(self) -> dict:
        value: dict[str, Any] = {}
        if self.file_length is not None:
            value["length"] = self.file_length
        if self.files is not None:
            value["files"] = [f._to_value() for f in self.files]
        value["name"] = self.name
        value["piece length"] = self.piece_length
        value["pieces"] = bytes(self.pieces)
        return value

    def to_bencode(self) -> bytes:
        return encode(self._to_value())

    @classmethod
    def _from_value(cls, value: Any) -> Info:
        entries = _as_dict(value, "info")
        files = None
        file_length = None
        if b"files" in entries:
            raw_files = entries[b"files"]
            if not isinstance(raw_files, list):
                raise BencodeError("files: expected a list")
            files = [File._from_value(item) for item in raw_files]
        if b"length" in entries:
            file_length = _as_uint(entries[b"length"], "file.length")
        if b"name" not in entries:
            raise BencodeError("missing field: name")
        if b"piece length" not in entries:
            raise BencodeError("missing field: piece_length")
        if b"pieces" not in entries:
            raise BencodeError("missing field: pieces")
        return cls(
            piece_length=_as_uint(entries[b"piece length"], "piece length"),
            pieces=_as_bytes(entries[b"pieces"], "pieces"),
            name=_as_str(entries[b"name"], "name"),
            file_length=file_length,
            files=files,
        )

    @classmethod
    def from_bencode(cls, data: bytes) -> Info:
        return cls._from_value(decode(data))


@dataclass
class MetaInfo:
    """A ``.torrent`` file: trackers, optional extras and the info dictionary."""

    announce: str = ""
    info: Info = field(default_factory=Info)
    announce_list: Optional[list[list[str]]] = None
    comment: Optional[str] = None
    creation_date: Optional[int] = None
    http_seeds: Optional[list[str]] = None

    def _to_value(self) -> dict:
        value: dict[str, Any] = {"announce": self.announce}
        if self.announce_list is not None:
            value["announce-list"] = [list(tier) for tier in self.announce_list]
        if self.comment is not None:
            value["comment"] = self.comment
        if self.creation_date is not None:
            value["creation date"] = self.creation_date
        if self.http_seeds is not None:
            value["httpseeds"] = list(self.http_seeds)
        value["info"] = self.info._to_value()
        return value

    def to_bencode(self) -> bytes:
        return encode(self._to_value())

    @classmethod
    def from_bencode(cls, data: bytes) -> MetaInfo:
        entries = _as_dict(decode(data), "metainfo")
        announce_list = None
        comment = None
        creation_date = None
        http_seeds = None
        if b"announce-list" in entries:
            tiers = entries[b"announce-list"]
            if not isinstance(tiers, list):
                raise BencodeError("announce_list: expected a list")
            announce_list = [_as_str_list(tier, "announce_list") for tier in tiers]
        if b"comment" in entries:
            comment = _as_str(entries[b"comment"], "comment")
        if b"creation date" in entries:
            creation_date = _as_uint(entries[b"creation date"], "creation_date")
        if b"httpseeds" in entries:
            http_seeds = _as_str_list(entries[b"httpseeds"], "http_seeds")
        if b"announce" not in entries:
            raise BencodeError("missing field: announce")
        if b"info" not in entries:
            raise BencodeError("missing field: info")
        return cls(
            announce=_as_str(entries[b"announce"], "announce"),
            info=Info._from_value(entries[b"info"]),
            announce_list=announce_list,
            comment=comment,
            creation_date=creation_date,
            http_seeds=http_seeds,
        )