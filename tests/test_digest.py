import hashlib
import io

import pytest

from c4id.digest import C4Hash, combine, combine_digests, compare_digests, id_of, id_of_stream, sha512
from c4id.errors import InvalidSymbol, MalformedDigest
from c4id.ids import encode

from conftest import EXPECTED_IDS, sha

EMPTY_ID = "c459dsjfscH38cYeXXYogktxf4Cd9ibshE3BHUo6a58hBXmRQdZrAkZzsWcbWtDg5oQstpDuni4Hirj75GEmTc1sFT"
ALFA_BRAVO_ID = "c44vdinsgjNntD3ZYh1AXESoUggosxWQksK6PfkMvWCfyWwGE3F3FP4FaogkF9M7zLjTQxEUrPTbiMBwGgiv3wKe5s"


def _digest(first: int, last: int) -> bytes:
    return bytes([first]) + bytes(62) + bytes([last])


class TestCanonicalComparator:
    """Pair ordering is a canonicalization rule, not a value comparison API."""

    def test_equal(self):
        d = sha("alfa")
        assert compare_digests(d, bytes(d)) == 0

    def test_first_byte_decides(self):
        # byte 0 is scanned first; the larger last byte of `a` never matters
        a = _digest(1, 9)
        b = _digest(2, 0)
        assert compare_digests(a, b) == -1
        assert compare_digests(b, a) == 1

    def test_first_differing_byte_decides(self):
        a = bytes(10) + b"\x01" + b"\xff" * 53
        b = bytes(10) + b"\x02" + bytes(53)
        assert compare_digests(a, b) == -1
        assert compare_digests(b, a) == 1

    def test_last_byte_only(self):
        assert compare_digests(_digest(0, 1), _digest(0, 2)) == -1

    def test_is_antisymmetric_over_worked_example(self):
        ds = [sha(w) for w in ("alfa", "bravo", "charlie", "delta")]
        for a in ds:
            for b in ds:
                assert compare_digests(a, b) == -compare_digests(b, a)

    def test_rejects_wrong_size(self):
        with pytest.raises(MalformedDigest):
            compare_digests(b"\x00" * 32, b"\x00" * 64)


class TestCombine:
    def test_known_pair(self):
        assert combine(EXPECTED_IDS[0], EXPECTED_IDS[1]) == ALFA_BRAVO_ID

    def test_symmetric(self):
        for a, b in zip(EXPECTED_IDS, EXPECTED_IDS[1:]):
            assert combine(a, b) == combine(b, a)

    def test_hashes_ordered_concatenation(self):
        lo, hi = _digest(1, 9), _digest(2, 0)
        want = hashlib.sha512(lo + hi).digest()
        assert combine_digests(hi, lo) == want
        assert combine(encode(hi), encode(lo)) == encode(want)

    def test_rejects_bad_id(self):
        with pytest.raises(InvalidSymbol):
            combine(EXPECTED_IDS[0], "c4" + "O" * 88)


class TestC4Hash:
    def test_empty(self):
        assert C4Hash().id() == EMPTY_ID
        assert id_of(b"") == EMPTY_ID

    def test_known_word(self):
        assert C4Hash(b"alfa").id() == EXPECTED_IDS[0]
        assert id_of(b"alfa") == EXPECTED_IDS[0]
        assert C4Hash(b"alfa").digest() == sha("alfa")

    def test_chunked_matches_one_shot(self):
        h = C4Hash().update(b"al").update(b"").update(b"fa")
        assert h.digest() == sha512(b"alfa")
        assert h.id() == EXPECTED_IDS[0]

    def test_copy_is_independent(self):
        h = C4Hash().update(b"al")
        c = h.copy()
        h.update(b"fa")
        c.update(b"xx")
        assert h.id() == EXPECTED_IDS[0]
        assert c.id() == id_of(b"alxx")

    def test_no_duplicate_one_shot_helpers(self):
        assert not hasattr(C4Hash, "id_of")
        assert not hasattr(C4Hash, "hash_bytes")

    def test_reset(self):
        h = C4Hash(b"garbage")
        h.reset()
        assert h.id() == EMPTY_ID

    def test_repr(self):
        assert repr(C4Hash()).startswith("<C4Hash c459dsjfscH3")


class TestStream:
    def test_small_chunks(self):
        data = b"charlie" * 1000
        assert id_of_stream(io.BytesIO(data), chunk_size=3) == id_of(data)

    def test_chunk_size_from_env(self, monkeypatch):
        monkeypatch.setenv("C4_CHUNK_SIZE", "2")
        assert id_of_stream(io.BytesIO(b"charlie")) == EXPECTED_IDS[2]

    def test_empty_stream(self):
        assert id_of_stream(io.BytesIO(b"")) == EMPTY_ID
