import struct

import pytest

from poc_beacon.rng.chacha import ChaChaRng, chacha_block

# Keystream for an all-zero key, zero nonce, block counter 0.
CHACHA20_ZERO_KEY = bytes.fromhex(
    "76b8e0ada0f13d90405d6ae55386bd28bdd219b8a08ded1aa836efcc8b770dc7"
    "da41597c5157488d7724e03fb8d84a376a43b8f41518a11cc387b669b2ee6586"
)
CHACHA12_ZERO_KEY = bytes.fromhex(
    "9bf49a6a0755f953811fce125f2683d50429c3bb49e074147e0089a52eae155f"
    "0564f879d27ae3c02ce82834acfa8c793a629f2ca0de6919610be82f411326be"
)


def test_chacha20_zero_key_vector():
    rng = ChaChaRng(bytes(32), rounds=20)
    assert rng.keystream(64) == CHACHA20_ZERO_KEY


def test_chacha12_zero_key_vector():
    rng = ChaChaRng(bytes(32), rounds=12)
    assert rng.keystream(64) == CHACHA12_ZERO_KEY


def test_default_rounds_is_twelve():
    assert ChaChaRng(bytes(32)).rounds == 12


def test_chacha20_matches_cryptography_keystream():
    ciphers = pytest.importorskip("cryptography.hazmat.primitives.ciphers")
    key = bytes(range(32))
    enc = ciphers.Cipher(ciphers.algorithms.ChaCha20(key, b"\x00" * 16), mode=None).encryptor()
    expected = enc.update(b"\x00" * 320)

    rng = ChaChaRng(key, rounds=20)
    assert rng.keystream(320) == expected


def test_words_are_little_endian_keystream():
    seed = bytes(range(32))
    stream = ChaChaRng(seed).keystream(128)
    rng = ChaChaRng(seed)
    words = [rng.next_u32() for _ in range(32)]
    assert struct.pack("<32I", *words) == stream


def test_next_u64_is_low_word_first():
    seed = b"\x42" * 32
    a = ChaChaRng(seed)
    b = ChaChaRng(seed)
    for _ in range(20):  # crosses a block boundary
        lo, hi = a.next_u32(), a.next_u32()
        assert b.next_u64() == (hi << 32) | lo


def test_u64_straddles_block_boundary():
    seed = b"\x07" * 32
    a = ChaChaRng(seed)
    for _ in range(15):
        a.next_u32()
    straddle = a.next_u64()

    key = struct.unpack("<8I", seed)
    block0 = chacha_block(key, 0, rounds=12)
    block1 = chacha_block(key, 1, rounds=12)
    assert straddle == (block1[0] << 32) | block0[15]


def test_word_pos_tracks_consumption():
    rng = ChaChaRng(bytes(32))
    assert rng.word_pos == 0
    rng.next_u32()
    assert rng.word_pos == 1
    for _ in range(17):
        rng.next_u32()
    assert rng.word_pos == 18


def test_same_seed_same_stream_different_seed_differs():
    assert ChaChaRng(b"\x01" * 32).keystream(96) == ChaChaRng(b"\x01" * 32).keystream(96)
    assert ChaChaRng(b"\x01" * 32).keystream(96) != ChaChaRng(b"\x02" * 32).keystream(96)


@pytest.mark.parametrize("seed", [b"", b"\x00" * 31, b"\x00" * 33])
def test_rejects_bad_seed_length(seed):
    with pytest.raises(ValueError):
        ChaChaRng(seed)


def test_rejects_odd_rounds():
    with pytest.raises(ValueError):
        ChaChaRng(bytes(32), rounds=7)
