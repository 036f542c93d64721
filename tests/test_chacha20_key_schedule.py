import numpy as np
import pytest

from chacha20.chacha20_key_schedule import (
    LAYOUT_32,
    LAYOUT_64,
    InvalidKeyLength,
    InvalidNonceLength,
    build_state,
    set_counter,
    to_bytes,
)


@pytest.mark.parametrize("key_len", [16, 32])
@pytest.mark.parametrize("nonce_len", [8, 12])
def test_valid_lengths(key_len, nonce_len):
    state, layout = build_state(bytes(key_len), bytes(nonce_len))
    assert state.shape == (16,)
    assert state.dtype == np.uint32
    assert layout == (LAYOUT_64 if nonce_len == 8 else LAYOUT_32)


@pytest.mark.parametrize("key_len", [0, 1, 15, 17, 24, 31, 33, 64, 123])
def test_invalid_key_length(key_len):
    with pytest.raises(InvalidKeyLength, match=f"got {key_len}"):
        build_state(bytes(key_len), bytes(12))


@pytest.mark.parametrize("nonce_len", [0, 7, 9, 11, 13, 16, 17, 24, 32])
def test_invalid_nonce_length(nonce_len):
    with pytest.raises(InvalidNonceLength, match=f"got {nonce_len}"):
        build_state(bytes(32), bytes(nonce_len))


def test_errors_are_value_errors():
    assert issubclass(InvalidKeyLength, ValueError)
    assert issubclass(InvalidNonceLength, ValueError)
    assert not issubclass(InvalidKeyLength, InvalidNonceLength)


def test_key_checked_before_nonce():
    with pytest.raises(InvalidKeyLength):
        build_state(bytes(5), bytes(5))


def test_constants_per_key_size():
    state32, _ = build_state(bytes(32), bytes(12))
    state16, _ = build_state(bytes(16), bytes(12))
    # "expand 32-byte k" / "expand 16-byte k"
    assert state32[:4].tolist() == [0x61707865, 0x3320646E, 0x79622D32, 0x6B206574]
    assert state16[:4].tolist() == [0x61707865, 0x3120646E, 0x79622D36, 0x6B206574]


def test_short_key_is_repeated():
    key = bytes(range(1, 17))
    state, _ = build_state(key, bytes(8))
    np.testing.assert_array_equal(state[4:8], state[8:12])
    assert state[4] == 0x04030201


def test_long_key_words_little_endian():
    key = bytes(range(32))
    state, _ = build_state(key, bytes(8))
    assert state[4] == 0x03020100
    assert state[11] == 0x1F1E1D1C


def test_nonce_layout_8_bytes():
    nonce = bytes.fromhex("0102030405060708")
    state, layout = build_state(bytes(32), nonce)
    assert layout.counter_words == 2
    assert layout.counter_mask == 2**64 - 1
    assert state[12:14].tolist() == [0, 0]
    assert state[14:16].tolist() == [0x04030201, 0x08070605]


def test_nonce_layout_12_bytes():
    nonce = bytes.fromhex("000000090000004a00000000")
    state, layout = build_state(bytes(32), nonce)
    assert layout.counter_words == 1
    assert layout.counter_mask == 2**32 - 1
    assert state[12] == 0
    assert state[13:16].tolist() == [0x09000000, 0x4A000000, 0x00000000]


def test_set_counter_64_bit_split():
    state, layout = build_state(bytes(32), bytes(8))
    set_counter(state, layout, 0x0000000100000002)
    assert state[12:14].tolist() == [2, 1]


def test_set_counter_32_bit_wraps_and_keeps_nonce():
    state, layout = build_state(bytes(32), bytes.fromhex("ffffffffffffffffffffffff"))
    set_counter(state, layout, 2**32 + 7)
    assert state[12] == 7
    assert state[13] == 0xFFFFFFFF


def test_to_bytes_accepts_buffers():
    raw = bytes(range(8))
    assert to_bytes(bytearray(raw)) == raw
    assert to_bytes(memoryview(raw)) == raw
    assert to_bytes(np.arange(8, dtype=np.uint8)) == raw
    assert to_bytes(list(raw)) == raw


@pytest.mark.parametrize("bad", [32, "a" * 32, np.zeros(8, dtype=np.int32), 1.5])
def test_to_bytes_rejects_non_buffers(bad):
    with pytest.raises(TypeError):
        to_bytes(bad, "key")
