from __future__ import annotations

"""Fail-fast grep to prevent module-level random state in the engine.

Generation must draw from the session's own random.Random so that seeded
runs are reproducible and concurrent sessions do not interfere.

Run:
  python -m tools.check_no_global_random

Exit code:
  0 - clean
  1 - forbidden pattern found
"""

import os
import re
from pathlib import Path
from typing import Iterator, List, Tuple


FORBIDDEN_PATTERNS = [
    # module-level helpers on the shared random instance
    r"\brandom\.(random|randint|randrange|uniform|choice|choices|shuffle|sample|gauss|triangular|seed)\s*\(",
    r"\bfrom\s+random\s+import\s+(?!Random\b)",
    r"\bnumpy\.random\.",
    r"\bnp\.random\.(?!default_rng\b)",
]

SCANNED_DIRS = ("lootgen", "app")

EXCLUDE_DIRS = {
    "__pycache__",
}


def iter_py_files(root: Path) -> Iterator[Path]:
    for top in SCANNED_DIRS:
        base = root / top
        if not base.is_dir():
            continue
        for dirpath, dirnames, filenames in os.walk(base):
            dn = Path(dirpath)
            dirnames[:] = [d for d in dirnames if d not in EXCLUDE_DIRS]
            for fn in filenames:
                if fn.endswith(".py"):
                    yield dn / fn


def find_hits(root: Path) -> List[Tuple[Path, int, str, str]]:
    compiled = [re.compile(p) for p in FORBIDDEN_PATTERNS]
    hits = []
    for fp in iter_py_files(root):
        text = fp.read_text(encoding="utf-8")
        for i, line in enumerate(text.splitlines(), start=1):
            for rx in compiled:
                if rx.search(line):
                    hits.append((fp.relative_to(root), i, line.strip(), rx.pattern))
    return hits


def main() -> int:
    root = Path(__file__).resolve().parents[1]
    hits = find_hits(root)

    if not hits:
        print("[OK] No module-level random usage found.")
        return 0

    print("[FAIL] Module-level random usage found:\n")
    for rel, ln, line, pat in hits:
        print(f"- {rel}:{ln}: {line}")
        print(f"  matched: {pat}")
    print("\nFix: thread the session's random.Random through the call instead.")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
