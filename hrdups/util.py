from __future__ import annotations
from pathlib import Path
import hashlib

import blake3

MIB = 1024 * 1024

def sha256_file(path: Path, chunk_size: int = 4096) -> str:
    h = hashlib.sha256()
    with open(path, "rb") as f:
        while True:
            b = f.read(chunk_size)
            if not b:
                break
            h.update(b)
    return h.hexdigest()


def blake3_file(path: Path, chunk_size: int = 4096) -> str:
    """Compute the 256-bit BLAKE3 digest for a file."""
    hasher = blake3.blake3()
    with open(path, "rb") as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            hasher.update(chunk)
    return hasher.hexdigest()


def format_mib(num_bytes: int) -> str:
    return f"{num_bytes / MIB:.2f}MiB"
