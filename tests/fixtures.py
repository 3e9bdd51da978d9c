from __future__ import annotations


def reference_hash(data: bytes, seed: int = 1) -> int:
    """Plain restatement of the mixing rule, kept independent of hasher.py.

    The product wraps at 2**32 and is then reduced mod 0xFFFFFFFF, which only
    changes the single state 0xFFFFFFFF (it becomes 0).
    """

    acc = seed
    for b in data:
        acc = (acc + b) * 65521 % 2**32 % 0xFFFFFFFF
    return acc
