# hasher.py
import config

MASK32 = 0xFFFFFFFF


def encode_line(line: str) -> bytes:
    """Manifest text as written to disk. Undecodable filename bytes pass through unchanged."""
    return line.encode(config.MANIFEST_ENCODING, "surrogateescape")


def mix(acc, data):
    """Fold every byte of ``data`` into ``acc`` and return the new value.

    acc = (acc + byte) * 65521, kept in 32 unsigned bits. A result equal to
    0xFFFFFFFF folds to 0 so manifests stay compatible with the C mangen tool.
    """
    for b in data:
        acc = ((acc + b) * config.HASH_MULTIPLIER & MASK32) % MASK32
    return acc


def hash_bytes(data: bytes, seed=config.HASH_SEED) -> int:
    return mix(seed, data)


class HashAccumulator:
    """Running manifest checksum, owned by a single generate or verify pass."""

    def __init__(self):
        self.value = config.HASH_SEED

    def reset(self):
        self.value = config.HASH_SEED

    def update(self, data: bytes):
        self.value = mix(self.value, data)

    def accumulate_line(self, line: str):
        self.update(encode_line(line))

    def hexdigest(self) -> str:
        return f"{self.value:08X}"


def compute_file_hash(filepath) -> int:
    """Hash a file's contents in read order.

    Raises OSError when the file cannot be opened or read; callers decide
    whether that is fatal.
    """
    acc = config.HASH_SEED
    with open(filepath, 'rb') as f:
        while chunk := f.read(config.READ_CHUNK_SIZE):
            acc = mix(acc, chunk)
    return acc
