import argparse
import sys

import numpy as np

from chacha20.chacha20_cipher import ChaCha20
from chacha20.chacha20_encrypt import encrypt_bytes
from chacha20.chacha20_decrypt import decrypt_bytes

from diferensial.avalanche import keystream_avalanche

from efisiensi.algorithm_speed import measure_throughput


DEFAULT_KEY_HEX = bytes(range(32)).hex()
DEFAULT_NONCE_HEX = "000000090000004a00000000"


def parse_hex(value: str, name: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError as e:
        raise ValueError(f"{name} is not valid hex: {e}") from e


def process_in_chunks(key: bytes, nonce: bytes, data: bytes, chunk_size: int) -> bytes:
    cipher = ChaCha20(key, nonce)
    out = bytearray()
    for i in range(0, len(data), chunk_size):
        out.extend(cipher.process(data[i:i + chunk_size]))
    return bytes(out)


def run(args: argparse.Namespace) -> int:
    key = parse_hex(args.key_hex, "key")
    nonce = parse_hex(args.nonce_hex, "nonce")
    ChaCha20(key, nonce)  # validate before doing any work

    rng = np.random.default_rng(42)
    data = rng.integers(0, 256, size=args.size, dtype=np.uint8).tobytes()
    print(f"Key: {len(key)} bytes, nonce: {len(nonce)} bytes, data: {len(data)} bytes")

    # Correctness
    print("\n== Consistency ==")
    one_shot = encrypt_bytes(key, nonce, data)
    chunked = process_in_chunks(key, nonce, data, args.chunk_size)
    roundtrip = decrypt_bytes(key, nonce, one_shot)
    print(f"chunked ({args.chunk_size} B) == one-shot: {chunked == one_shot}")
    print(f"decrypt(encrypt(data)) == data: {roundtrip == data}")

    # Diffusion
    print("\n== Avalanche (bit change rate of first keystream block) ==")
    for target, size in (("key", len(key)), ("nonce", len(nonce))):
        rates = [keystream_avalanche(key, nonce, bit, target=target) for bit in range(0, size * 8, 8)]
        print(f"{target}: min={min(rates):.2f}% mean={np.mean(rates):.2f}% max={max(rates):.2f}%")

    # Timing
    print("\n== Timing ==")
    repeats = max(1, args.repeats)
    t_one, mib_one, _ = measure_throughput(encrypt_bytes, len(data), key, nonce, data, repeats=repeats, warmup=1)
    t_chunk, mib_chunk, _ = measure_throughput(
        process_in_chunks, len(data), key, nonce, data, args.chunk_size, repeats=repeats, warmup=1
    )
    print(f"one-shot avg over {repeats} run(s): {t_one:.6f} s ({mib_one:.2f} MiB/s)")
    print(f"chunked  avg over {repeats} run(s): {t_chunk:.6f} s ({mib_chunk:.2f} MiB/s)")

    return 0 if chunked == one_shot and roundtrip == data else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="ChaCha20 consistency, avalanche and speed diagnostics.")
    parser.add_argument("--size", type=int, default=1 << 16, help="Bytes of random data to process.")
    parser.add_argument("--chunk-size", type=int, default=100, help="Chunk size for streaming processing.")
    parser.add_argument("--repeats", type=int, default=3, help="Repeats for timing average.")
    parser.add_argument("--key-hex", default=DEFAULT_KEY_HEX, help="Key as hex (16 or 32 bytes).")
    parser.add_argument("--nonce-hex", default=DEFAULT_NONCE_HEX, help="Nonce as hex (8 or 12 bytes).")
    args = parser.parse_args()
    if args.size < 0 or args.chunk_size < 1:
        parser.error("--size must be >= 0 and --chunk-size >= 1")
    try:
        sys.exit(run(args))
    except ValueError as e:
        parser.error(str(e))
