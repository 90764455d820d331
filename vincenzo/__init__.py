"""BitTorrent building blocks: bencode, torrent metainfo, magnet links and the extension protocol."""

__version__ = "0.1.0"