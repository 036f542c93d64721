import numpy as np

from chacha20.chacha20_encrypt import generate_keystream


def _as_array(data: bytes) -> np.ndarray:
    return np.frombuffer(bytes(data), dtype=np.uint8)


def byte_change_rate(a: bytes, b: bytes) -> float:
    """
    Percentage of byte positions that differ between two equal-length buffers.
    """
    x, y = _as_array(a), _as_array(b)
    if x.shape != y.shape:
        raise ValueError("Buffers must have the same length for byte change rate.")
    if x.size == 0:
        return 0.0
    changed = np.count_nonzero(x != y)
    return float(changed) / float(x.size) * 100.0


def bit_change_rate(a: bytes, b: bytes) -> float:
    """
    Percentage of bits that differ between two equal-length buffers (~50% for a good keystream).
    """
    x, y = _as_array(a), _as_array(b)
    if x.shape != y.shape:
        raise ValueError("Buffers must have the same length for bit change rate.")
    if x.size == 0:
        return 0.0
    changed = int(np.unpackbits(np.bitwise_xor(x, y)).sum())
    return float(changed) / float(x.size * 8) * 100.0


def flip_bit(data: bytes, bit: int) -> bytes:
    """Copy of data with one bit flipped; bit 0 is the low bit of the first byte."""
    out = bytearray(data)
    if not 0 <= bit < len(out) * 8:
        raise IndexError(f"bit {bit} out of range for {len(out)} bytes")
    out[bit // 8] ^= 1 << (bit % 8)
    return bytes(out)


def keystream_avalanche(key: bytes, nonce: bytes, bit: int, target: str = "key", length: int = 64) -> float:
    """
    Bit change rate between the keystream for (key, nonce) and the keystream
    after flipping a single bit of the key or the nonce.
    target: 'key' or 'nonce'
    """
    if target == "key":
        key2, nonce2 = flip_bit(key, bit), nonce
    elif target == "nonce":
        key2, nonce2 = key, flip_bit(nonce, bit)
    else:
        raise ValueError("target must be 'key' or 'nonce'")
    ks1 = generate_keystream(key, nonce, length)
    ks2 = generate_keystream(key2, nonce2, length)
    return bit_change_rate(ks1, ks2)
