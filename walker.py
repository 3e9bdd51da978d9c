# walker.py
"""Directory traversal that turns a tree into manifest lines.

Traversal is depth-first in directory-listing order (or name order when
``sort_entries`` is set). Every emitted line is also folded into the walker's
own HashAccumulator, so the checksum line always covers exactly what was
written.
"""
import errno
import io
import os
import stat
import sys
from dataclasses import dataclass
from typing import Optional

import config
from hasher import HashAccumulator, compute_file_hash, encode_line
from pattern import match_pattern

SENTINEL = "sentinel"
SKIP = "skip"


class PathTooLongError(OSError):
    pass


@dataclass(frozen=True)
class ExclusionFilter:
    exclude_name: Optional[str] = None
    exclude_pattern: Optional[str] = None

    def excludes(self, name: str) -> bool:
        if self.exclude_name is not None and name == self.exclude_name:
            return True
        if self.exclude_pattern is not None and match_pattern(self.exclude_pattern, name):
            return True
        return False


@dataclass(frozen=True)
class ManifestEntry:
    relative_path: str
    file_hash: int

    def render(self) -> str:
        return config.LINE_FORMAT.format(path=self.relative_path, hash=self.file_hash)


def format_checksum_line(value: int) -> str:
    return config.CHECKSUM_FORMAT.format(hash=value)


class DirectoryWalker:
    def __init__(self, exclusion=None, out=None, err=None, sort_entries=False,
                 on_unreadable=SENTINEL, max_path_len=config.MAX_PATH_LEN):
        if on_unreadable not in (SENTINEL, SKIP):
            raise ValueError(f"on_unreadable must be {SENTINEL!r} or {SKIP!r}, got {on_unreadable!r}")
        self.exclusion = exclusion or ExclusionFilter()
        # Binary sink: the bytes written are the bytes checksummed
        self.out = out if out is not None else sys.stdout.buffer
        self.err = err if err is not None else sys.stderr
        self.sort_entries = sort_entries
        self.on_unreadable = on_unreadable
        self.max_path_len = max_path_len
        self.accumulator = HashAccumulator()
        self.entries = []
        self.root = None

    @property
    def checksum(self) -> int:
        return self.accumulator.value

    def walk(self, root):
        """Emit one manifest line per regular file under ``root``.

        Resets the running checksum first. Returns the list of emitted
        ManifestEntry objects in emission order.
        """
        self.root = os.fspath(root)
        self.accumulator.reset()
        self.entries = []

        stack = []
        names = self._list_dir("")
        if names is not None:
            stack.append(("", iter(names)))

        while stack:
            rel_dir, names = stack[-1]
            name = next(names, None)
            if name is None:
                stack.pop()
                continue

            if name in (".", ".."):
                continue
            if self.exclusion.excludes(name):
                continue

            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            try:
                full_path = self._compose(rel_path)
                st = os.lstat(full_path)
            except PathTooLongError as e:
                print(f"[ERROR] {e}", file=self.err)
                continue
            except OSError as e:
                print(f"[ERROR] Cannot stat {os.path.join(self.root, rel_path)}: {e}", file=self.err)
                continue

            if stat.S_ISDIR(st.st_mode):
                children = self._list_dir(rel_path)
                if children is not None:
                    stack.append((rel_path, iter(children)))
            elif stat.S_ISREG(st.st_mode):
                self._emit_file(full_path, rel_path)
            # Symlinks, devices, fifos and sockets are not part of the manifest

        return self.entries

    def generate(self, root) -> int:
        """Walk ``root`` and finish the manifest with its checksum line."""
        self.walk(root)
        self.out.write(encode_line(format_checksum_line(self.checksum)))
        self.out.flush()
        return self.checksum

    def _compose(self, rel_path):
        full_path = os.path.join(self.root, rel_path) if rel_path else self.root
        if len(os.fsencode(full_path)) >= self.max_path_len:
            raise PathTooLongError(errno.ENAMETOOLONG, "Path too long", full_path)
        return full_path

    def _list_dir(self, rel_path):
        try:
            path = self._compose(rel_path)
        except PathTooLongError as e:
            print(f"[ERROR] {e}", file=self.err)
            return None
        try:
            with os.scandir(path) as it:
                names = [entry.name for entry in it]
        except OSError as e:
            print(f"[ERROR] Cannot open directory {path}: {e}", file=self.err)
            return None
        if self.sort_entries:
            names.sort()
        return names

    def _emit_file(self, full_path, rel_path):
        try:
            file_hash = compute_file_hash(full_path)
        except OSError as e:
            print(f"[ERROR] Failed to hash {full_path}: {e}", file=self.err)
            if self.on_unreadable == SKIP:
                return
            file_hash = config.UNREADABLE_HASH

        entry = ManifestEntry(rel_path, file_hash)
        data = encode_line(entry.render())
        self.out.write(data)
        self.accumulator.update(data)
        self.entries.append(entry)


def render_manifest(root, exclusion=None, sort_entries=False, err=None) -> bytes:
    """Return the manifest for ``root`` exactly as it would be written, checksum line included."""
    buf = io.BytesIO()
    DirectoryWalker(exclusion, out=buf, err=err, sort_entries=sort_entries).generate(root)
    return buf.getvalue()


def generate_manifest(root, exclusion=None, sort_entries=False, err=None) -> str:
    """Manifest text for ``root``; ``encode_line`` on the result gives back the exact bytes."""
    return render_manifest(root, exclusion, sort_entries, err).decode(config.MANIFEST_ENCODING, "surrogateescape")
