from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any, Dict

from . import config
from .injector import instrument_tree
from .stages.config_augmenter import augment_project
from .stages.merge import merge_patches
from .stages.mirror import mirror_project


def check_preconditions(original: Path, target: Path, subtree: str) -> None:
    """
    Fail before anything is written: the original must look like a Maven
    project with the designated source subtree, and the two roots must not
    overlap (the target is deleted before copying).
    """
    if not (original / config.MANIFEST_NAME).is_file():
        raise FileNotFoundError(f"{config.MANIFEST_NAME} not found in original project: {original}")
    if not (original / subtree).is_dir():
        raise FileNotFoundError(f"{subtree} not found in original project: {original}")
    if target == original or original in target.parents or target in original.parents:
        raise ValueError(f"Target {target} must not overlap the original project {original}")


def check_replaceable_target(target: str | Path) -> None:
    """
    A destination that already holds files is only replaced when an earlier
    run produced it. Used where the caller does not own the file system.
    """
    target = Path(target).expanduser().resolve()
    if not target.exists():
        return
    if not target.is_dir():
        raise ValueError(f"Target {target} exists and is not a directory")
    if any(target.iterdir()) and not (target / config.OUTPUT_MARKER).is_file():
        raise ValueError(
            f"Target {target} is not empty and was not created by log-injector; refusing to replace it"
        )


def run_pipeline(original: str | Path, target: str | Path, subtree: str = config.INSTRUMENT_SUBTREE) -> Dict[str, Any]:
    """
    Main pipeline: mirror -> instrument (staging) -> merge targets -> config
    Each stage finishes before the next; the original is only read.
    """
    original = Path(original).expanduser().resolve()
    target = Path(target).expanduser().resolve()

    check_preconditions(original, target, subtree)

    print(f"==> ORIGINAL: {original}")
    print(f"==> TARGET  : {target}")

    # 1) Whole runnable project, without .git/ and target/
    mirror_project(original, target)
    (target / config.OUTPUT_MARKER).write_text(f"{original}\n", encoding="utf-8")

    # 2) Instrument into a temp staging tree (never directly into target),
    # 3) then patch ONLY the instrumentation targets into target
    with tempfile.TemporaryDirectory(prefix="log-injector-") as td:
        staging = Path(td)
        results = instrument_tree(original, subtree, staging)
        patched = merge_patches(staging, target)

    # 4) JSON logging dependency, logback config, logs/ directory
    config_changes = augment_project(target)

    print(f"DONE. Runnable instrumented project created at: {target}")
    print("Try:")
    print(f'  cd "{target}"')
    for cmd in config.FOLLOW_UP_COMMANDS:
        print(f"  {cmd}")

    return {
        "original": str(original),
        "target": str(target),
        "parsed_units": len(results),
        "instrumented": [item for r in results for item in r.instrumented],
        "skipped": [item for r in results for item in r.skipped],
        "loggers_added": [name for r in results for name in r.loggers_added],
        "patched": patched,
        "config": config_changes,
    }
