"""Helpers"""
import typing


def seq_xor(seq_a: bytes, seq_b: bytes) -> bytes:
    """xor two byte strings, truncating to the shorter one"""
    return bytes(a ^ b for a, b in zip(seq_a, seq_b))


def split_blocks(data: bytes, block_size: int) -> typing.Iterator[bytes]:
    """yield consecutive blocks; the last one may be short"""
    for i in range(0, len(data), block_size):
        yield data[i:i+block_size]


def increment_counter(counter: bytes) -> bytes:
    """add one to a big-endian counter, wrapping around at its width"""
    width = len(counter)
    value = (int.from_bytes(counter, 'big') + 1) % 2**(8*width)
    return value.to_bytes(width, 'big')
