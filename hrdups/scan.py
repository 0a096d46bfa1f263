# hrdups/scan.py
"""
Duplicate grouping in two stages:
1. Bucket every non-empty regular file by size
2. Fingerprint only buckets that gain a second member (lazy hashing)
"""
from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Set

from .fingerprint import Fingerprinter
from .fs import LocalFilesystem

LogCallback = Callable[[str], None]

# Key of the single deferred entry in a bucket that has one member
UNKNOWN_FINGERPRINT = ""


@dataclass(frozen=True)
class FileEntry:
    path: Path
    size: int


@dataclass
class FingerprintGroup:
    size: int
    fingerprint: str
    entries: List[FileEntry]

    @property
    def base(self) -> FileEntry:
        return self.entries[0]

    @property
    def duplicates(self) -> List[FileEntry]:
        return self.entries[1:]


@dataclass
class SizeBucket:
    size: int
    by_fingerprint: Dict[str, List[FileEntry]] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return sum(len(v) for v in self.by_fingerprint.values())

    @property
    def deferred(self) -> bool:
        return UNKNOWN_FINGERPRINT in self.by_fingerprint

    def add(self, entry: FileEntry, fingerprint: Callable[[Path], str]) -> None:
        if not self.by_fingerprint:
            self.by_fingerprint[UNKNOWN_FINGERPRINT] = [entry]
            return
        if self.deferred:
            # Second member: hash the deferred file and re-key it
            pending = self.by_fingerprint[UNKNOWN_FINGERPRINT]
            self.by_fingerprint = {fingerprint(pending[0].path): pending}
        self.by_fingerprint.setdefault(fingerprint(entry.path), []).append(entry)


class DuplicateIndex:
    """All size buckets for one run, keyed by byte length."""

    def __init__(self, fingerprinter: Fingerprinter) -> None:
        self.fingerprinter = fingerprinter
        self.buckets: Dict[int, SizeBucket] = {}
        self._seen: Set[str] = set()

    def add(self, entry: FileEntry) -> bool:
        """Index ``entry``. Returns False if the path was already indexed."""
        key = os.path.realpath(entry.path)
        if key in self._seen:
            return False
        bucket = self.buckets.get(entry.size)
        if bucket is None:
            bucket = self.buckets[entry.size] = SizeBucket(entry.size)
        bucket.add(entry, self.fingerprinter)
        self._seen.add(key)
        return True

    @property
    def file_count(self) -> int:
        return len(self._seen)

    @property
    def hash_count(self) -> int:
        return self.fingerprinter.calls

    def groups(self) -> Iterator[FingerprintGroup]:
        for size in sorted(self.buckets):
            bucket = self.buckets[size]
            for fp in sorted(bucket.by_fingerprint):
                yield FingerprintGroup(size, fp, list(bucket.by_fingerprint[fp]))

    def duplicate_groups(self) -> Iterator[FingerprintGroup]:
        for group in self.groups():
            if len(group.entries) > 1:
                yield group


def scan_root(root: str | Path, index: DuplicateIndex, fs: LocalFilesystem) -> None:
    """Depth-first walk of ``root``; symlinks are never followed or indexed.

    Any FilesystemError (unlistable directory, unreadable file) propagates
    immediately, leaving ``index`` with whatever was added before it.
    """
    stack: List[Path] = [Path(root)]
    while stack:
        directory = stack.pop()
        for entry in fs.scandir(directory):
            kind = fs.entry_kind(entry)
            path = Path(entry.path)
            if kind == "dir":
                stack.append(path)
            elif kind == "file":
                size = fs.size(path)
                if size:
                    index.add(FileEntry(path, size))


def scan_roots(
    roots: Iterable[str | Path],
    index: DuplicateIndex,
    fs: Optional[LocalFilesystem] = None,
    log_cb: Optional[LogCallback] = None,
) -> None:
    def emit_log(message: str) -> None:
        print(message)
        if not log_cb:
            return
        try:
            log_cb(message)
        except Exception:
            pass

    fs = fs or LocalFilesystem()
    for root in roots:
        emit_log(f"[INFO] Scanning {root}")
        scan_root(root, index, fs)
    emit_log(f"[INFO] Indexed {index.file_count} files, computed {index.hash_count} hashes")
