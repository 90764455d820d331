"""Magnet links: the info hash, display name and trackers of a torrent."""

from __future__ import annotations

import binascii
from typing import Optional
from urllib.parse import unquote_to_bytes

__all__ = ["MagnetLinkInvalid", "Magnet"]

_PREFIX = "magnet:?"
_UNKNOWN_NAME = "Unknown"
_UDP_SCHEME = "udp://"
_INFO_HASH_LEN = 20


class MagnetLinkInvalid(ValueError):
    """Raised when a magnet link, or a field of it, cannot be parsed."""


def _percent_decode(text: str) -> str:
    """Decode percent escapes strictly as UTF-8; ``+`` is left as it is."""
    try:
        return unquote_to_bytes(text).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MagnetLinkInvalid(f"invalid percent-encoded text {text!r}") from exc


class Magnet:
    """A parsed magnet link.

    Field values are kept as they appear in the link, still percent-encoded;
    the ``parse_*`` methods decode them.
    """

    def __init__(self, magnet_url: str) -> None:
        if not magnet_url.startswith(_PREFIX):
            raise MagnetLinkInvalid(f"not a magnet link: {magnet_url!r}")

        self.dn: Optional[str] = None
        self.hash_type: Optional[str] = None
        self.xt: Optional[str] = None
        self.xl: Optional[int] = None
        self.tr: list[str] = []
        self.ws: list[str] = []

        query = magnet_url[len(_PREFIX):].replace("&amp;", "&")
        for part in filter(None, query.split("&")):
            key, _, value = part.partition("=")
            if key == "xt":
                if self.xt is None:
                    self._set_exact_topic(value)
            elif key == "dn":
                if self.dn is None:
                    self.dn = value
            elif key == "xl":
                if self.xl is None and value.isdigit():
                    self.xl = int(value)
            elif key == "tr":
                self.tr.append(value)
            elif key == "ws":
                self.ws.append(value)

    def _set_exact_topic(self, value: str) -> None:
        if value.startswith("urn:"):
            hash_type, sep, digest = value[len("urn:"):].partition(":")
            if sep:
                self.hash_type = hash_type
                self.xt = digest
                return
        self.xt = value

    def _key(self) -> tuple:
        return (self.dn, self.hash_type, self.xt, self.xl, tuple(self.tr), tuple(self.ws))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Magnet):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return (
            f"Magnet(dn={self.dn!r}, hash_type={self.hash_type!r}, xt={self.xt!r}, "
            f"xl={self.xl!r}, tr={self.tr!r}, ws={self.ws!r})"
        )

    def parse_dn(self) -> str:
        """The decoded display name, or ``"Unknown"`` when absent or undecodable."""
        if self.dn is not None:
            try:
                return _percent_decode(self.dn)
            except MagnetLinkInvalid:
                pass
        return _UNKNOWN_NAME

    def parse_xt(self) -> bytes:
        """The 20-byte info hash from the hex ``xt`` field."""
        if self.xt is None:
            raise MagnetLinkInvalid("magnet link has no exact topic (xt)")
        try:
            info_hash = binascii.unhexlify(self.xt)
        except (binascii.Error, ValueError) as exc:
            raise MagnetLinkInvalid(f"info hash is not valid hex: {self.xt!r}") from exc
        if len(info_hash) < _INFO_HASH_LEN:
            raise MagnetLinkInvalid(
                f"info hash has {len(info_hash)} bytes, expected {_INFO_HASH_LEN}"
            )
        return info_hash[:_INFO_HASH_LEN]

    def parse_trackers(self) -> list[str]:
        """UDP trackers as ``host:port`` strings, without scheme or path."""
        trackers = []
        for raw in self.tr:
            if not raw.startswith("udp"):
                continue
            tracker = _percent_decode(raw).replace(_UDP_SCHEME, "")
            tracker, _, _ = tracker.partition("/")
            trackers.append(tracker)
        return trackers