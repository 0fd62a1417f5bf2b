from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Iterable, List

from .. import config


def _is_excluded(rel: str, excluded: Iterable[str]) -> bool:
    rel = rel.replace("\\", "/")
    return any(rel == ex or rel.startswith(ex + "/") for ex in excluded)


def delete_if_exists(path: Path) -> None:
    path = Path(path)
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


def mirror_project(
    source_root: Path,
    dest_root: Path,
    excluded: Iterable[str] = config.EXCLUDED_DIRS,
) -> None:
    """
    Copy the whole project to dest_root, skipping .git/ and target/.
    dest_root is removed first so nothing survives from a previous run.
    """
    source_root = Path(source_root)
    dest_root = Path(dest_root)
    excluded = tuple(excluded)

    print(f"==> Copying project to target (excluding {', '.join(e + '/' for e in excluded)}) ...")

    def _ignore(directory: str, names: List[str]) -> List[str]:
        rel_dir = os.path.relpath(directory, source_root)
        rel_dir = "" if rel_dir == "." else rel_dir
        return [
            name for name in names
            if _is_excluded(os.path.join(rel_dir, name) if rel_dir else name, excluded)
        ]

    try:
        delete_if_exists(dest_root)
        shutil.copytree(source_root, dest_root, ignore=_ignore, copy_function=shutil.copy2)
    except shutil.Error as e:
        # copytree collects per-file failures as (src, dst, why)
        first = e.args[0][0] if e.args and isinstance(e.args[0], list) and e.args[0] else None
        where = first[0] if first else dest_root
        raise OSError(f"Failed to mirror project at {where}: {e}") from e
    except OSError as e:
        where = e.filename or dest_root
        raise OSError(f"Failed to mirror project at {where}: {e.strerror or e}") from e
