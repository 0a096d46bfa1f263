# hrdups/dedupe.py
"""Replace duplicate files with hardlinks to their group's base, or remove them."""
from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional

from .config import DedupeConfig
from .fs import LocalFilesystem
from .metadata import compatible, describe_mismatch, same_inode
from .scan import DuplicateIndex, FingerprintGroup
from .util import format_mib

LogCallback = Callable[[str], None]


@dataclass
class DedupStats:
    groups: int = 0
    files_linked: int = 0
    files_removed: int = 0
    dirs_removed: int = 0
    mismatches: int = 0
    already_linked: int = 0
    bytes_saved: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {
            "groups": self.groups,
            "files_linked": self.files_linked,
            "files_removed": self.files_removed,
            "dirs_removed": self.dirs_removed,
            "mismatches": self.mismatches,
            "already_linked": self.already_linked,
            "bytes_saved": self.bytes_saved,
        }


def dedupe_group(
    group: FingerprintGroup,
    cfg: DedupeConfig,
    fs: LocalFilesystem,
    stats: DedupStats,
    emit_log: LogCallback,
) -> None:
    stats.groups += 1
    base = group.base.path
    emit_log(f"Group {stats.groups}:")
    emit_log(f"*\t{base}")

    for entry in group.duplicates:
        dup = entry.path
        emit_log(f"\t{dup}")

        if os.path.realpath(base) == os.path.realpath(dup):
            emit_log(f"[WARN] Same file reached twice: {base} and {dup}")
            continue

        linked = same_inode(base, dup, fs)
        if linked and not cfg.remove:
            emit_log(f"Already linked {base} and {dup}")
            stats.already_linked += 1
            continue

        if not compatible(base, dup, fs):
            emit_log(f"Owner/mode mismatch {base} and {dup} ({describe_mismatch(base, dup, fs)})")
            stats.mismatches += 1
            continue

        if not cfg.pretend:
            fs.unlink(dup)
            if cfg.remove:
                stats.files_removed += 1
                if not cfg.keep_empty_dirs:
                    _prune_parent(dup, fs, stats, emit_log)
            else:
                fs.link(base, dup)
                stats.files_linked += 1
                if cfg.restore_ownership:
                    _restore_ownership(base, dup, fs, emit_log)

        # Removing a second name of the base's inode frees no space
        if not linked:
            stats.bytes_saved += group.size


def _prune_parent(path: Path, fs: LocalFilesystem, stats: DedupStats, emit_log: LogCallback) -> None:
    parent = path.parent
    if fs.is_empty_dir(parent):
        fs.rmdir(parent)
        stats.dirs_removed += 1
        emit_log(f"Empty directory removed {parent}")


def _restore_ownership(base: Path, link: Path, fs: LocalFilesystem, emit_log: LogCallback) -> None:
    # The link shares the base's inode; re-apply in case it changed meanwhile.
    try:
        st = fs.stat(base)
        fs.chown(link, st.st_uid, st.st_gid)
        fs.chmod(link, st.st_mode)
    except OSError as e:
        emit_log(f"[WARN] Cannot restore owner/mode on {link}: {e}")


def dedupe_index(
    index: DuplicateIndex,
    cfg: DedupeConfig,
    fs: Optional[LocalFilesystem] = None,
    stats: Optional[DedupStats] = None,
    log_cb: Optional[LogCallback] = None,
) -> DedupStats:
    """Process every group of two or more files in (size, fingerprint) order.

    Delete, link and rmdir failures raise FilesystemError and stop the run;
    groups already processed keep their changes. Pass ``stats`` to observe
    progress made before such a failure.
    """

    def emit_log(message: str) -> None:
        print(message)
        if not log_cb:
            return
        try:
            log_cb(message)
        except Exception:
            pass

    fs = fs or LocalFilesystem()
    stats = stats if stats is not None else DedupStats()
    emit_log("Removing..." if cfg.remove else "Hard-linking...")
    for group in index.duplicate_groups():
        dedupe_group(group, cfg, fs, stats, emit_log)
    emit_log("Done!")
    emit_log(f"Saved {format_mib(stats.bytes_saved)}")
    return stats
