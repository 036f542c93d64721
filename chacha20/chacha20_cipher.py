from typing import Optional

import numpy as np

from .chacha20_block import BLOCK_SIZE, chacha_block
from .chacha20_key_schedule import build_state, set_counter, to_bytes


class ChaCha20:
    """
    ChaCha20 keystream generator with a streaming XOR interface.

    Accepts 16- or 32-byte keys and 8-byte (64-bit counter) or 12-byte
    (32-bit counter) nonces. Successive process() calls continue the same
    keystream, so a message may be fed in chunks of any size.
    Not thread-safe: one instance is one cursor.
    """

    def __init__(self, key: bytes, nonce: bytes, counter: int = 0):
        self._state, self._layout = build_state(key, nonce)
        self._counter = counter & self._layout.counter_mask
        self._offset = 0
        self._block: Optional[np.ndarray] = None

    @property
    def counter(self) -> int:
        """Index of the next block to be generated."""
        return self._counter

    @property
    def offset(self) -> int:
        """Position inside the current block; 0 means a fresh block is due."""
        return self._offset

    def _next_block(self) -> np.ndarray:
        state = self._state.copy()
        set_counter(state, self._layout, self._counter)
        self._counter = (self._counter + 1) & self._layout.counter_mask
        return np.frombuffer(chacha_block(state), dtype=np.uint8)

    def process(self, data) -> bytes:
        """
        XOR data with the next len(data) keystream bytes.
        Encryption and decryption are the same operation.
        """
        buf = np.frombuffer(to_bytes(data), dtype=np.uint8)
        n = buf.size
        if n == 0:
            return b""
        out = np.empty(n, dtype=np.uint8)
        pos = 0

        # Finish the block left over from the previous call
        if self._offset:
            take = min(BLOCK_SIZE - self._offset, n)
            out[:take] = buf[:take] ^ self._block[self._offset:self._offset + take]
            pos = take
            self._offset = (self._offset + take) % BLOCK_SIZE
            if self._offset == 0:
                self._block = None

        while n - pos >= BLOCK_SIZE:
            out[pos:pos + BLOCK_SIZE] = buf[pos:pos + BLOCK_SIZE] ^ self._next_block()
            pos += BLOCK_SIZE

        if pos < n:
            rest = n - pos
            block = self._next_block()
            out[pos:] = buf[pos:] ^ block[:rest]
            self._block = block
            self._offset = rest

        return out.tobytes()

    def keystream(self, length: int) -> bytes:
        """Return the next `length` keystream bytes, advancing the cursor."""
        return self.process(bytes(length))

    def __repr__(self) -> str:
        bits = 64 if self._layout.counter_words == 2 else 32
        return f"ChaCha20(counter_bits={bits}, counter={self._counter}, offset={self._offset})"
