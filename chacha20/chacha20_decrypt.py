import numpy as np
from .chacha20_cipher import ChaCha20
from .chacha20_encrypt import encrypt_array


def decrypt_bytes(key: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
    """
    ChaCha20 decryption (identical to encryption): XOR with keystream.
    nonce may be 8 bytes (64-bit counter) or 12 bytes (32-bit counter).
    """
    return ChaCha20(key, nonce).process(ciphertext)


def decrypt_array(arr: np.ndarray, key: bytes, nonce: bytes) -> np.ndarray:
    """
    Decrypt a uint8 array of any shape, returning a uint8 array of the same shape.
    """
    return encrypt_array(arr, key, nonce)
