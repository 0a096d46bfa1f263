"""Command-line interface for hrdups."""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional, Sequence

from pydantic import ValidationError

from .config import DedupeConfig, HrdupsConfig, ScannerConfig
from .dedupe import DedupStats, dedupe_index
from .fingerprint import HASHERS, Fingerprinter
from .fs import FilesystemError, LocalFilesystem
from .scan import DuplicateIndex, scan_roots


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hrdups",
        description="Hardlink (remove) duplicate files",
    )
    parser.add_argument("roots", nargs="*", metavar="ROOT", help="Directory to scan (may repeat, default: ./)")
    parser.add_argument("-k", "--keep", action="store_true", help="Keep empty folders on remove")
    parser.add_argument("-p", "--pretend", action="store_true", help="Dry-run: report savings without touching disk")
    parser.add_argument("-r", "--remove", action="store_true", help="Don't hardlink duplicates, just remove")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Explain hashing process (repeat for more output)")
    parser.add_argument("--algorithm", choices=sorted(HASHERS), default="sha256", help="Content hash algorithm")
    parser.add_argument("--chunk-bytes", type=int, default=4096, help="Chunk size for streaming reads (bytes)")
    return parser


def config_from_args(args: argparse.Namespace) -> HrdupsConfig:
    return HrdupsConfig(
        roots=list(args.roots) or ["./"],
        verbose=args.verbose,
        scanner=ScannerConfig(algorithm=args.algorithm, chunk_bytes=args.chunk_bytes),
        dedupe=DedupeConfig(
            remove=args.remove,
            pretend=args.pretend,
            keep_empty_dirs=args.keep,
        ),
    )


def run(cfg: HrdupsConfig, fs: Optional[LocalFilesystem] = None) -> DedupStats:
    """Scan then deduplicate. Fatal errors are reported on stderr, not raised."""
    fs = fs or LocalFilesystem()
    fingerprinter = Fingerprinter(cfg.scanner.algorithm, cfg.scanner.chunk_bytes, cfg.verbose)
    index = DuplicateIndex(fingerprinter)
    roots: List[str] = cfg.roots or ["./"]

    print("Building hash map...")
    try:
        scan_roots(roots, index, fs)
    except FilesystemError as e:
        # The partial index is still deduplicated
        print(f"Warning: {e}", file=sys.stderr)

    stats = DedupStats()
    try:
        dedupe_index(index, cfg.dedupe, fs, stats)
    except FilesystemError as e:
        print(f"Error: {e}", file=sys.stderr)
    return stats


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        cfg = config_from_args(args)
    except ValidationError as e:
        parser.error(str(e))
    run(cfg)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
