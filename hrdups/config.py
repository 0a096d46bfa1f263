from __future__ import annotations
from typing import List, Literal
from pydantic import BaseModel, Field

class ScannerConfig(BaseModel):
    algorithm: Literal["sha256", "blake3"] = "sha256"
    chunk_bytes: int = Field(4096, gt=0)  # 4 KiB streaming reads

class DedupeConfig(BaseModel):
    remove: bool = False  # delete duplicates instead of hardlinking
    pretend: bool = False
    keep_empty_dirs: bool = False
    restore_ownership: bool = True  # chown/chmod the new link to the base

class HrdupsConfig(BaseModel):
    roots: List[str] = Field(default_factory=lambda: ["./"])
    verbose: int = Field(0, ge=0)
    scanner: ScannerConfig = Field(default_factory=ScannerConfig)
    dedupe: DedupeConfig = Field(default_factory=DedupeConfig)
