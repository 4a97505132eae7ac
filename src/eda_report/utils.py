from __future__ import annotations

import hashlib
import json
import math
from pathlib import Path
from typing import Any, Optional


def sha256_file(path: Path, chunk_size: int = 1024 * 1024) -> str:
    """
    Computes a sha256 fingerprint of the source file for traceability.
    """
    h = hashlib.sha256()
    with path.open("rb") as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            h.update(chunk)
    return h.hexdigest()


def stable_dumps(obj: Any) -> str:
    """JSON with sorted keys and a trailing newline, byte-stable across runs."""
    return json.dumps(obj, indent=2, sort_keys=True, ensure_ascii=False, allow_nan=False) + "\n"


def write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def round_or_none(x: Optional[float], ndigits: int = 6) -> Optional[float]:
    if x is None:
        return None
    x = float(x)
    if math.isnan(x) or math.isinf(x):
        return None
    # -0.0 would serialize differently from 0.0
    return float(round(x, ndigits)) + 0.0
