# vincenzo

Building blocks for working with the BitTorrent protocol (version 1) in pure
Python, with no third-party dependencies.

## What it covers

- `vincenzo.bencode`: encoding and decoding of bencoded data. `encode` writes
  dictionary keys in sorted order; `decode` reads one complete value and
  rejects trailing bytes; `decode_prefix` reads the first value and returns it
  with the number of bytes it used. Decoded strings are `bytes` and
  dictionary keys are `bytes`. Malformed input raises `BencodeError`, a
  subclass of `ValueError`.
- `vincenzo.metainfo`: `.torrent` files as `MetaInfo`, `Info` and `File`,
  each with `to_bencode()` and `from_bencode(data)`. An `Info` reports its
  total size (`get_size`), number of pieces (`piece_count`), blocks per piece
  (`blocks_per_piece`), the size of a given piece (`piece_size`) and the list
  of `BlockInfo(index, begin, length)` entries needed to download the whole
  torrent (`get_block_infos`), split at piece and file boundaries with blocks
  of at most `BLOCK_LEN` (16384) bytes.
- `vincenzo.extension`: the handshake payload of the extension protocol
  (BEP 10), as `Extension` and its message table `M`.
  `Extension.supported(metadata_size)` builds the handshake this package
  announces (`ut_metadata` as message 3, `reqq` 6).
- `vincenzo.metadata`: the `ut_metadata` messages (BEP 9) used to fetch the
  info dictionary from peers: `Metadata.request`, `Metadata.data`,
  `Metadata.reject` and `Metadata.extract`.
- `vincenzo.magnet`: magnet link parsing with `Magnet`. It reads the display
  name, the 20-byte info hash and the UDP trackers. A link that does not start
  with `magnet:?`, or a field that cannot be decoded, raises
  `MagnetLinkInvalid`, a subclass of `ValueError`.

## Installing

```
pip install .
```

## Examples

Bencode:

```python
from vincenzo.bencode import decode, encode

encode({"piece": 0, "msg_type": 0})   # b"d8:msg_typei0e5:piecei0ee"
decode(b"l4:spami42ee")               # [b"spam", 42]
```

Reading a torrent file:

```python
from pathlib import Path
from vincenzo.metainfo import MetaInfo

meta = MetaInfo.from_bencode(Path("book.torrent").read_bytes())
info = meta.info
print(info.name, info.get_size(), info.piece_count())

for block in info.get_block_infos():
    print(block.index, block.begin, block.length)
```

Working with a magnet link:

```python
from vincenzo.magnet import Magnet

magnet = Magnet(
    "magnet:?xt=urn:btih:ab6ad7ff24b5ed3a61352a1f1a7811a8c3cc6dde"
    "&dn=archlinux&tr=udp%3A%2F%2Ftracker.example.com%3A6969%2Fannounce"
)
info_hash = magnet.parse_xt()        # 20 bytes
name = magnet.parse_dn()             # "archlinux"
trackers = magnet.parse_trackers()   # ["tracker.example.com:6969"]
```

Extension handshake and metadata messages:

```python
from vincenzo.extension import Extension
from vincenzo.metadata import Metadata

handshake = Extension.supported(5205).to_bencode()

request = Metadata.request(0).to_bencode()   # b"d8:msg_typei0e5:piecei0ee"

message = Metadata.data(0, b"d4:name4:booke")
header, info_bytes = Metadata.extract(message)
# header == Metadata(msg_type=1, piece=0, total_size=14)
# info_bytes == b"d4:name4:booke"
```

## What it does not do

This package only models the data of the protocol. It does not open
connections to peers or trackers, does not announce to trackers, does not
write downloaded data to disk, and has no command-line program or background
service. Magnet links are parsed, not resolved.

## Running the tests

```
pip install ".[test]"
pytest
```