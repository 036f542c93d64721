import numpy as np

# ========== ChaCha20 permutation (uint32, wraparound arithmetic) ==========
# Quarter-round lanes: a, b, c, d index arrays for the four columns, then the four diagonals.
_COLUMNS = (
    np.array([0, 1, 2, 3]),
    np.array([4, 5, 6, 7]),
    np.array([8, 9, 10, 11]),
    np.array([12, 13, 14, 15]),
)
_DIAGONALS = (
    np.array([0, 1, 2, 3]),
    np.array([5, 6, 7, 4]),
    np.array([10, 11, 8, 9]),
    np.array([15, 12, 13, 14]),
)

DOUBLE_ROUNDS = 10
BLOCK_SIZE = 64


def rotl32(x: np.ndarray, n: int) -> np.ndarray:
    return (x << np.uint32(n)) | (x >> np.uint32(32 - n))


def quarter_round(x: np.ndarray, a, b, c, d) -> None:
    """
    ChaCha quarter-round on words a, b, c, d of the uint32 array x, in place.
    Each of a, b, c, d may be a single index or an array of indices, so that
    several independent quarter-rounds run as one vector operation.
    """
    a, b, c, d = (np.atleast_1d(i) for i in (a, b, c, d))
    x[a] += x[b]; x[d] ^= x[a]; x[d] = rotl32(x[d], 16)
    x[c] += x[d]; x[b] ^= x[c]; x[b] = rotl32(x[b], 12)
    x[a] += x[b]; x[d] ^= x[a]; x[d] = rotl32(x[d], 8)
    x[c] += x[d]; x[b] ^= x[c]; x[b] = rotl32(x[b], 7)


def double_round(x: np.ndarray) -> None:
    """Column round followed by diagonal round, in place."""
    quarter_round(x, *_COLUMNS)
    quarter_round(x, *_DIAGONALS)


def chacha_block(state: np.ndarray) -> bytes:
    """
    Produce one 64-byte keystream block from a 16-word state matrix.
    The permuted state is added back to the input state (feed-forward) and
    serialized as little-endian words. The input array is left untouched.
    """
    if state.shape != (16,) or state.dtype != np.uint32:
        raise ValueError("State must be 16 uint32 words.")
    working = state.copy()
    for _ in range(DOUBLE_ROUNDS):
        double_round(working)
    return (working + state).astype("<u4").tobytes()
