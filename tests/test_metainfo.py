import pytest

from vincenzo.bencode import BencodeError
from vincenzo.metainfo import BLOCK_LEN, BlockInfo, File, Info, MetaInfo


def test_get_block_infos_smaller_than_block_info():
    info = Info(file_length=30, piece_length=15, pieces=bytes(40))
    assert info.get_block_infos() == [
        BlockInfo(index=0, begin=0, length=15),
        BlockInfo(index=1, begin=0, length=15),
    ]


def test_get_block_infos_one_block_piece():
    info = Info(file_length=32868, piece_length=BLOCK_LEN, pieces=bytes(60))
    assert info.get_block_infos() == [
        BlockInfo(0, 0, BLOCK_LEN),
        BlockInfo(1, 0, BLOCK_LEN),
        BlockInfo(2, 0, 100),
    ]


def test_get_block_infos_even():
    info = Info(
        files=[File(length=32768, path=["a.txt"])],
        piece_length=BLOCK_LEN,
        pieces=bytes(40),
    )
    assert info.get_block_infos() == [
        BlockInfo(0, 0, BLOCK_LEN),
        BlockInfo(1, 0, BLOCK_LEN),
    ]


def test_get_block_infos_odd():
    info = Info(
        files=[File(length=32768, path=["a.txt"])],
        piece_length=32668,
        pieces=bytes(40),
    )
    assert info.get_block_infos() == [
        BlockInfo(0, 0, BLOCK_LEN),
        BlockInfo(0, BLOCK_LEN, 16284),
        BlockInfo(1, 0, 100),
    ]


def test_get_block_infos_file_boundary():
    info = Info(
        files=[
            File(length=BLOCK_LEN, path=["a.txt"]),
            File(length=12384, path=["b.txt"]),
            File(length=BLOCK_LEN, path=["c.txt"]),
        ],
        piece_length=45152,
        pieces=bytes(20),
    )
    assert info.piece_size(0) == 45152
    assert info.get_block_infos() == [
        BlockInfo(0, 0, BLOCK_LEN),
        BlockInfo(0, BLOCK_LEN, 12384),
        BlockInfo(0, BLOCK_LEN + 12384, BLOCK_LEN),
    ]


def test_get_block_infos_odd_pre():
    info = Info(
        files=[File(length=10, path=[""]), File(length=32768, path=[""])],
        piece_length=32668,
        pieces=bytes(40),
    )
    assert info.piece_size(0) == 32668
    assert info.piece_size(1) == 110
    assert info.get_block_infos() == [
        BlockInfo(0, 0, 10),
        BlockInfo(0, 10, BLOCK_LEN),
        BlockInfo(0, 10 + BLOCK_LEN, 16274),
        BlockInfo(1, 0, 110),
    ]


def test_get_block_infos_odd_post():
    info = Info(
        files=[File(length=32768, path=[""]), File(length=10, path=[""])],
        piece_length=32668,
        pieces=bytes(40),
    )
    assert info.piece_size(0) == 32668
    assert info.piece_size(1) == 110
    assert info.get_block_infos() == [
        BlockInfo(0, 0, BLOCK_LEN),
        BlockInfo(0, BLOCK_LEN, 16284),
        BlockInfo(1, 0, 100),
        BlockInfo(1, 100, 10),
    ]


def test_get_block_infos_long_torrent():
    info = Info(
        piece_length=32768,
        pieces=bytes(5480),
        name="name",
        files=[
            File(length=5034059, path=["dir", "file_a.pdf"]),
            File(length=62, path=["file_1.txt"]),
            File(length=237, path=["file_2.txt"]),
        ],
    )
    blocks = info.get_block_infos()
    assert blocks[307] == BlockInfo(153, 16384, 4171)
    assert blocks[308] == BlockInfo(153, 20555, 62)
    assert blocks[309] == BlockInfo(153, 20617, 237)
    assert len(blocks) == 310
    assert sum(b.length for b in blocks) == info.get_size()


def test_block_sizes_sum_to_total():
    info = Info(file_length=100000, piece_length=40000, pieces=bytes(60))
    blocks = info.get_block_infos()
    assert sum(b.length for b in blocks) == 100000
    assert all(b.length <= BLOCK_LEN for b in blocks)


def test_get_size_and_counts():
    info = Info(
        files=[File(length=100, path=["a"]), File(length=50, path=["b"])],
        piece_length=32768,
        pieces=bytes(40),
    )
    assert info.get_size() == 150
    assert info.piece_count() == 2
    assert info.blocks_per_piece() == 2
    assert info.blocks_len() == 4


def test_get_size_of_malformed_info_is_zero():
    info = Info(piece_length=BLOCK_LEN, pieces=bytes(20))
    assert info.get_size() == 0
    assert info.get_block_infos() == []


def test_piece_size_last_piece_exact_multiple():
    info = Info(file_length=30, piece_length=15, pieces=bytes(40))
    assert info.piece_size(1) == 15


def test_with_name_returns_copy():
    info = Info(name="old", piece_length=1, pieces=b"")
    renamed = info.with_name("new")
    assert renamed.name == "new"
    assert info.name == "old"


def test_file_get_piece_len_and_pieces():
    f = File(length=100, path=["x"])
    assert f.get_piece_len(0, 30) == 30
    assert f.get_piece_len(3, 30) == 10
    assert f.pieces(30) == 4
    assert f.pieces(50) == 2


def test_file_serialization():
    f = File(path=["a", "b", "c.txt"], length=222)
    assert f.to_bencode() == b"d6:lengthi222e4:pathl1:a1:b5:c.txtee"


def test_file_deserialization():
    f = File.from_bencode(b"d6:lengthi222e4:pathl1:a1:b5:c.txtee")
    assert f == File(path=["a", "b", "c.txt"], length=222)


def test_file_length_out_of_range():
    with pytest.raises(BencodeError):
        File.from_bencode(b"d6:lengthi4294967296ee")


EXPECTED_SINGLE = (
    b"d8:announce35:http://tracker.example.com/announce"
    b"4:infod6:lengthi10e4:name1:f12:piece lengthi16384e6:pieces20:"
    + b"a" * 20
    + b"ee"
)


def _single() -> MetaInfo:
    return MetaInfo(
        announce="http://tracker.example.com/announce",
        info=Info(piece_length=16384, pieces=b"a" * 20, name="f", file_length=10),
    )


def test_encode_single_file_torrent():
    assert _single().to_bencode() == EXPECTED_SINGLE


def test_decode_single_file_torrent():
    assert MetaInfo.from_bencode(EXPECTED_SINGLE) == _single()


def test_multi_file_roundtrip():
    torrent = MetaInfo(
        announce="udp://tracker.example.com:6969/announce",
        announce_list=[
            ["udp://tracker.example.com:6969/announce"],
            ["udp://other.example.com:1337/announce"],
        ],
        comment="dynamic metainfo from client",
        creation_date=1_662_883_480,
        http_seeds=["https://seed.example.com/file"],
        info=Info(
            piece_length=16384,
            pieces=bytes(range(40)),
            name="book",
            files=[File(length=4092334, path=["book.pdf"])],
        ),
    )
    data = torrent.to_bencode()
    decoded = MetaInfo.from_bencode(data)
    assert decoded == torrent
    assert decoded.to_bencode() == data


def test_unknown_keys_ignored():
    data = b"d8:announce1:x3:fooi1e4:infod4:name1:n12:piece lengthi1e6:pieces0:ee"
    torrent = MetaInfo.from_bencode(data)
    assert torrent.announce == "x"
    assert torrent.info == Info(piece_length=1, pieces=b"", name="n")


def test_missing_announce_is_error():
    with pytest.raises(BencodeError, match="announce"):
        MetaInfo.from_bencode(b"d4:infod4:name1:n12:piece lengthi1e6:pieces0:ee")


def test_missing_info_is_error():
    with pytest.raises(BencodeError, match="info"):
        MetaInfo.from_bencode(b"d8:announce1:xe")


@pytest.mark.parametrize(
    "data, field_name",
    [
        (b"d12:piece lengthi1e6:pieces0:e", "name"),
        (b"d4:name1:n6:pieces0:e", "piece_length"),
        (b"d4:name1:n12:piece lengthi1ee", "pieces"),
    ],
)
def test_info_missing_fields(data, field_name):
    with pytest.raises(BencodeError, match=field_name):
        Info.from_bencode(data)


def test_info_not_a_dict():
    with pytest.raises(BencodeError):
        Info.from_bencode(b"li1ee")