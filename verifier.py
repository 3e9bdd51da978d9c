# verifier.py
import enum
import re
import sys

import config
from hasher import HashAccumulator

CHECKSUM_LINE_RE = re.compile(
    re.escape(config.CHECKSUM_PREFIX.encode("ascii")) + rb"([0-9A-Fa-f]{8})\n?"
)


class VerifyResult(enum.Enum):
    VALID = "Valid"
    CORRUPTED = "Corrupted"
    INVALID = "Invalid"

    def __str__(self):
        return self.value


def parse_checksum_line(line: bytes):
    """Return the stored checksum if ``line`` is a checksum line, else None.

    Only the literal prefix followed by exactly eight hex digits counts, so a
    file named like a checksum line is still an ordinary manifest line.
    """
    m = CHECKSUM_LINE_RE.fullmatch(line)
    if m is None:
        return None
    return int(m.group(1), 16)


class ManifestVerifier:
    """Replays a manifest's lines through a fresh accumulator.

    The first checksum line found is held back as the stored value; every
    other line, before or after it, is accumulated byte for byte.
    """

    def __init__(self, err=None):
        self.err = err if err is not None else sys.stderr
        self.accumulator = HashAccumulator()
        self.stored = None
        self.computed = None

    def verify(self, manifest_path) -> VerifyResult:
        self.accumulator.reset()
        self.stored = None
        self.computed = None

        try:
            with open(manifest_path, 'rb') as f:
                for line in f:
                    if self.stored is None:
                        parsed = parse_checksum_line(line)
                        if parsed is not None:
                            self.stored = parsed
                            continue
                    self.accumulator.update(line)
        except OSError as e:
            print(f"[ERROR] Cannot read manifest {manifest_path}: {e}", file=self.err)
            return VerifyResult.INVALID

        self.computed = self.accumulator.value
        if self.stored is None:
            print("Invalid or missing checksum line", file=self.err)
            return VerifyResult.INVALID
        if self.stored == self.computed:
            return VerifyResult.VALID
        return VerifyResult.CORRUPTED


def verify_manifest(manifest_path, err=None) -> VerifyResult:
    return ManifestVerifier(err=err).verify(manifest_path)
