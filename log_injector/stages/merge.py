from __future__ import annotations

import shutil
from pathlib import Path
from typing import Callable, List

from ..rules import is_instrumentation_target


def merge_patches(
    staging_root: Path,
    dest_root: Path,
    predicate: Callable[[str], bool] = is_instrumentation_target,
) -> List[str]:
    """
    Copy ONLY the staged files accepted by predicate (relative posix path)
    over dest_root. Everything else the engine re-printed is left behind,
    so DTOs, controllers and repositories stay exactly as mirrored.
    """
    staging_root = Path(staging_root)
    dest_root = Path(dest_root)

    print("==> Copying ONLY instrumentation targets into target...")
    patched: List[str] = []

    for path in sorted(staging_root.rglob("*")):
        if not path.is_file():
            continue

        rel = path.relative_to(staging_root).as_posix()
        if not predicate(rel):
            continue

        dest = dest_root / rel
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(path, dest)

        patched.append(rel)
        print(f"  patched: {rel}")

    return patched
