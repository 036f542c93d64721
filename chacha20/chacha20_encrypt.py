import numpy as np
from .chacha20_cipher import ChaCha20


def generate_keystream(key: bytes, nonce: bytes, length: int, counter: int = 0) -> bytes:
    """
    ChaCha20 keystream of 'length' bytes, starting at block 'counter'.
    - key: 16 or 32 bytes
    - nonce: 8 bytes (64-bit counter) or 12 bytes (32-bit counter)
    """
    return ChaCha20(key, nonce, counter=counter).keystream(length)


def encrypt_bytes(key: bytes, nonce: bytes, plaintext: bytes) -> bytes:
    """
    ChaCha20 stream cipher (XOR with keystream), starting at block 0.
    """
    return ChaCha20(key, nonce).process(plaintext)


def encrypt_array(arr: np.ndarray, key: bytes, nonce: bytes) -> np.ndarray:
    """
    Encrypt a uint8 array of any shape, returning a uint8 array of the same shape.
    """
    if arr.dtype != np.uint8:
        raise ValueError("Array must be uint8.")
    flat = np.ascontiguousarray(arr).reshape(-1)
    ks = np.frombuffer(generate_keystream(key, nonce, flat.size), dtype=np.uint8)
    cipher_flat = np.bitwise_xor(flat, ks)
    return cipher_flat.reshape(arr.shape)
