from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Tuple

from .. import config

# <dependencies> lists inside these sections are not the project-level one
_NESTED_SECTIONS = ("dependencyManagement", "build", "profiles")


def _nested_spans(text: str) -> List[Tuple[int, int]]:
    spans: List[Tuple[int, int]] = []
    for tag in _NESTED_SECTIONS:
        start = 0
        while True:
            i = text.find(f"<{tag}>", start)
            if i == -1:
                break
            j = text.find(f"</{tag}>", i)
            if j == -1:
                break
            spans.append((i, j))
            start = j
    return spans


def _project_dependencies_close(text: str) -> int:
    spans = _nested_spans(text)
    start = 0
    while True:
        i = text.find("</dependencies>", start)
        if i == -1:
            return -1
        if not any(a <= i < b for a, b in spans):
            return i
        start = i + 1


def _line_prefix(text: str, offset: int) -> Tuple[int, str]:
    """(start of the line holding offset, text between line start and offset)"""
    line_start = text.rfind("\n", 0, offset) + 1
    return line_start, text[line_start:offset]


def _dependency_block(indent: str, nl: str) -> str:
    inner = indent + "  "
    lines = [
        f"{indent}<dependency>",
        f"{inner}<groupId>{config.DEPENDENCY_GROUP}</groupId>",
        f"{inner}<artifactId>{config.DEPENDENCY_ID}</artifactId>",
        f"{inner}<version>{config.DEPENDENCY_VERSION}</version>",
        f"{indent}</dependency>",
    ]
    return nl.join(lines) + nl


def _insert_before(text: str, offset: int, block: str, nl: str) -> str:
    line_start, prefix = _line_prefix(text, offset)
    if prefix.strip() == "":
        return text[:line_start] + block + text[line_start:]
    return text[:offset] + nl + block + text[offset:]


def ensure_dependency(pom_path: Path) -> bool:
    """
    Add the logstash encoder dependency to pom.xml unless its artifact id is
    already mentioned anywhere. Pure text patch, no XML parsing.
    Returns True when the file was changed.
    """
    pom_path = Path(pom_path)
    with open(pom_path, "r", encoding="utf-8", newline="") as f:
        pom = f.read()

    if config.DEPENDENCY_ID in pom:
        print(f"==> {pom_path.name} already contains {config.DEPENDENCY_ID}")
        return False

    print(f"==> Adding {config.DEPENDENCY_ID} dependency to {pom_path.name} ...")
    nl = "\r\n" if "\r\n" in pom else "\n"

    close = _project_dependencies_close(pom)
    if close != -1:
        _, prefix = _line_prefix(pom, close)
        indent = prefix if prefix.strip() == "" else ""
        pom = _insert_before(pom, close, _dependency_block(indent + "  ", nl), nl)
    else:
        end = pom.rfind("</project>")
        if end == -1:
            raise ValueError(f"{pom_path} has neither </dependencies> nor </project>")
        indent = "  "
        section = (
            f"{indent}<dependencies>{nl}"
            + _dependency_block(indent + "  ", nl)
            + f"{indent}</dependencies>{nl}"
        )
        pom = _insert_before(pom, end, section, nl)

    with open(pom_path, "w", encoding="utf-8", newline="") as f:
        f.write(pom)
    print(f"==> {pom_path.name} patched")
    return True


def ensure_logging_config(logback_path: Path) -> bool:
    """
    Create logback-spring.xml (rolling daily JSON file, 7 days kept) unless
    a file already exists at that path. Returns True when it was created.
    """
    logback_path = Path(logback_path)
    if logback_path.exists():
        print(f"==> {logback_path.name} already exists")
        return False

    print(f"==> Creating {logback_path.name} for JSON logs (logs/app.jsonl) ...")
    logback_path.parent.mkdir(parents=True, exist_ok=True)
    with open(logback_path, "x", encoding="utf-8") as f:
        f.write(config.LOGBACK_TEMPLATE)
    print(f"==> {logback_path.name} created")
    return True


def ensure_logs_dir(target: Path) -> bool:
    logs = Path(target) / config.LOGS_DIR
    if logs.is_dir():
        return False
    logs.mkdir(parents=True, exist_ok=True)
    return True


def augment_project(target: Path) -> Dict[str, bool]:
    target = Path(target)
    return {
        "dependency_added": ensure_dependency(target / config.MANIFEST_NAME),
        "logging_config_created": ensure_logging_config(target / config.LOGBACK_CONFIG_PATH),
        "logs_dir_created": ensure_logs_dir(target),
    }
