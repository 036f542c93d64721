from typing import NamedTuple, Tuple

import numpy as np

# ========== Errors ==========
class InvalidKeyLength(ValueError):
    """Key is not 16 or 32 bytes long."""


class InvalidNonceLength(ValueError):
    """Nonce is not 8 or 12 bytes long."""


# ========== Constants ==========
SIGMA = b"expand 32-byte k"  # 32-byte keys
TAU = b"expand 16-byte k"    # 16-byte keys

KEY_SIZES = (16, 32)
NONCE_SIZES = (8, 12)


class NonceLayout(NamedTuple):
    """Resolved counter layout of words 12-15."""
    counter_words: int
    counter_mask: int


# 8-byte nonce: 64-bit counter in words 12-13, nonce in 14-15.
# 12-byte nonce: 32-bit counter in word 12, nonce in 13-15.
LAYOUT_64 = NonceLayout(counter_words=2, counter_mask=0xFFFFFFFFFFFFFFFF)
LAYOUT_32 = NonceLayout(counter_words=1, counter_mask=0xFFFFFFFF)


def to_bytes(value, name: str = "data") -> bytes:
    """
    Coerce a buffer (bytes, bytearray, memoryview, uint8 array, list of ints) to bytes.
    Plain integers are rejected, since bytes(n) would silently build n zero bytes.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, np.ndarray):
        if value.dtype != np.uint8:
            raise TypeError(f"{name} array must be uint8, got {value.dtype}")
        return value.tobytes()
    if isinstance(value, (int, str)):
        raise TypeError(f"{name} must be a bytes-like object, got {type(value).__name__}")
    return bytes(value)


def _le_words(b: bytes) -> np.ndarray:
    return np.frombuffer(b, dtype="<u4").astype(np.uint32)


def build_state(key, nonce) -> Tuple[np.ndarray, NonceLayout]:
    """
    Validate key and nonce and build the 16-word state template.
    Counter words are left at zero; see set_counter.
    """
    key = to_bytes(key, "key")
    nonce = to_bytes(nonce, "nonce")
    if len(key) not in KEY_SIZES:
        raise InvalidKeyLength(f"Key must be 16 or 32 bytes, got {len(key)}")
    if len(nonce) not in NONCE_SIZES:
        raise InvalidNonceLength(f"Nonce must be 8 or 12 bytes, got {len(nonce)}")

    if len(key) == 32:
        constants = _le_words(SIGMA)
        key_words = _le_words(key)
    else:
        constants = _le_words(TAU)
        key_words = np.tile(_le_words(key), 2)

    layout = LAYOUT_64 if len(nonce) == 8 else LAYOUT_32
    counter_words = np.zeros(layout.counter_words, dtype=np.uint32)
    state = np.concatenate([constants, key_words, counter_words, _le_words(nonce)])
    return state, layout


def set_counter(state: np.ndarray, layout: NonceLayout, counter: int) -> None:
    """Write the block counter (low word first) into the state, in place."""
    counter &= layout.counter_mask
    state[12] = counter & 0xFFFFFFFF
    if layout.counter_words == 2:
        state[13] = counter >> 32
