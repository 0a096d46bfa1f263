# hrdups/fingerprint.py
"""Streaming content fingerprints for duplicate candidates."""
from __future__ import annotations
from pathlib import Path
from typing import Callable, Dict, Optional

from .fs import FilesystemError, describe
from .util import blake3_file, sha256_file

LogCallback = Callable[[str], None]

HASHERS: Dict[str, Callable[[Path, int], str]] = {
    "sha256": sha256_file,
    "blake3": blake3_file,
}


class Fingerprinter:
    """Hashes whole files in fixed-size chunks.

    ``verbose`` controls diagnostics: 0 prints nothing, 1 prints the path
    being hashed, 2 or more prints the path followed by its digest.
    ``calls`` counts how many files were actually read.
    """

    def __init__(
        self,
        algorithm: str = "sha256",
        chunk_bytes: int = 4096,
        verbose: int = 0,
        log_cb: Optional[LogCallback] = None,
    ) -> None:
        if algorithm not in HASHERS:
            raise ValueError(f"Unsupported hash algorithm: {algorithm!r}")
        if chunk_bytes <= 0:
            raise ValueError("chunk_bytes must be positive")
        self.algorithm = algorithm
        self.chunk_bytes = chunk_bytes
        self.verbose = verbose
        self.calls = 0
        self._hasher = HASHERS[algorithm]
        self._log_cb = log_cb

    def _emit(self, message: str) -> None:
        print(message)
        if not self._log_cb:
            return
        try:
            self._log_cb(message)
        except Exception:
            pass

    def fingerprint(self, path: Path) -> str:
        try:
            digest = self._hasher(path, self.chunk_bytes)
        except OSError as e:
            raise FilesystemError(f'Cannot open "{path}": {describe(e)}.') from e
        self.calls += 1
        if self.verbose > 1:
            self._emit(f"\t{path} {digest}")
        elif self.verbose:
            self._emit(f"\t{path}")
        return digest

    __call__ = fingerprint
