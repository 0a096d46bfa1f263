# hrdups/fs.py
"""Filesystem primitives used by the scanner and the executor.

Everything that touches the disk besides reading file content goes through
``LocalFilesystem`` so tests can swap in a mock for a single call.
"""
from __future__ import annotations
import os
from pathlib import Path
from typing import Iterator, Optional


class FilesystemError(RuntimeError):
    """Fatal filesystem failure. The message carries the path and OS error text."""


def describe(exc: OSError) -> str:
    return exc.strerror or str(exc)


class LocalFilesystem:
    def scandir(self, path: Path) -> Iterator[os.DirEntry]:
        try:
            with os.scandir(path) as it:
                entries = list(it)
        except OSError as e:
            raise FilesystemError(f'Cannot open "{path}": {describe(e)}.') from e
        return iter(entries)

    def entry_kind(self, entry: os.DirEntry) -> Optional[str]:
        """Classify a scandir entry as ``"file"``, ``"dir"`` or None (symlinks, special files)."""
        try:
            if entry.is_symlink():
                return None
            if entry.is_dir(follow_symlinks=False):
                return "dir"
            if entry.is_file(follow_symlinks=False):
                return "file"
        except OSError as e:
            raise FilesystemError(f'Cannot open "{entry.path}": {describe(e)}.') from e
        return None

    def size(self, path: Path) -> int:
        try:
            return os.stat(path).st_size
        except OSError as e:
            raise FilesystemError(f'Cannot open "{path}": {describe(e)}.') from e

    def stat(self, path: Path) -> os.stat_result:
        return os.stat(path)

    def is_empty_dir(self, path: Path) -> bool:
        if not os.path.isdir(path):
            return False
        try:
            with os.scandir(path) as it:
                for _ in it:
                    return False
        except OSError as e:
            raise FilesystemError(f'Cannot open "{path}": {describe(e)}.') from e
        return True

    def unlink(self, path: Path) -> None:
        try:
            os.unlink(path)
        except OSError as e:
            raise FilesystemError(f'Cannot delete file "{path}": {describe(e)}.') from e

    def rmdir(self, path: Path) -> None:
        try:
            os.rmdir(path)
        except OSError as e:
            raise FilesystemError(f'Cannot delete empty directory "{path}": {describe(e)}.') from e

    def link(self, base: Path, path: Path) -> None:
        try:
            os.link(base, path)
        except OSError as e:
            raise FilesystemError(f'Cannot create hardlink for "{base}" as "{path}": {describe(e)}.') from e

    def chown(self, path: Path, uid: int, gid: int) -> None:
        os.chown(path, uid, gid)

    def chmod(self, path: Path, mode: int) -> None:
        os.chmod(path, mode)
