"""Owner/mode compatibility check gating hardlink merges.

A hardlink shares one inode, so linking two paths whose owner or mode differ
would silently replace the duplicate's metadata with the base's. Such pairs
are reported and skipped instead.
"""
from __future__ import annotations
import os
from pathlib import Path
from typing import List, Optional, Tuple

from .fs import LocalFilesystem

FIELDS: Tuple[Tuple[str, str], ...] = (
    ("uid", "st_uid"),
    ("gid", "st_gid"),
    ("mode", "st_mode"),
    ("dev", "st_dev"),
)


def _stat(path: Path, fs: LocalFilesystem) -> Optional[os.stat_result]:
    try:
        return fs.stat(path)
    except OSError:
        return None


def compatible(base: Path, dup: Path, fs: LocalFilesystem) -> bool:
    """True when both paths exist and agree on uid, gid, mode and device."""
    a = _stat(base, fs)
    b = _stat(dup, fs)
    if a is None or b is None:
        return False
    return all(getattr(a, attr) == getattr(b, attr) for _, attr in FIELDS)


def describe_mismatch(base: Path, dup: Path, fs: LocalFilesystem) -> str:
    a = _stat(base, fs)
    b = _stat(dup, fs)
    if a is None or b is None:
        missing = [label for label, st in (("base", a), ("duplicate", b)) if st is None]
        return ", ".join(f"{label}=missing" for label in missing)
    parts: List[str] = []
    for label, attr in FIELDS:
        va, vb = getattr(a, attr), getattr(b, attr)
        if va == vb:
            continue
        if label == "mode":
            parts.append(f"mode {va:o} != {vb:o}")
        else:
            parts.append(f"{label} {va} != {vb}")
    return ", ".join(parts)


def same_inode(base: Path, dup: Path, fs: LocalFilesystem) -> bool:
    a = _stat(base, fs)
    b = _stat(dup, fs)
    if a is None or b is None:
        return False
    return a.st_dev == b.st_dev and a.st_ino == b.st_ino
