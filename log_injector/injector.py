from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from . import config
from .adapters.java_adapter import JavaAdapter
from .cir.model import Edit, LogStatement, MethodDecl, SourceUnit, TypeDecl
from .rules import (
    classify_action,
    has_logger_field,
    is_eligible_method,
    is_instrumented,
    is_target_type,
    loggable_parameters,
)


@dataclass
class UnitResult:
    path: str
    code: str
    changed: bool = False
    loggers_added: List[str] = field(default_factory=list)
    instrumented: List[Dict[str, Any]] = field(default_factory=list)
    skipped: List[Dict[str, Any]] = field(default_factory=list)


# ---------------- Synthesis ----------------

def _kv(key: str, value_expr: str) -> str:
    return f'{config.KV_FUNCTION}("{key}", {value_expr})'


def build_log_statement(type_decl: TypeDecl, method: MethodDecl) -> LogStatement:
    action, event = classify_action(method.name)
    return LogStatement(
        marker=config.MARKER,
        event=event,
        action=action,
        class_name=type_decl.name,
        method=method.name,
        params=tuple(loggable_parameters(method)),
    )


def render_log_statement(stmt: LogStatement) -> str:
    """
    log.info("LPS", kv("event", "db-read"), ..., kv("orderId", orderId));
    Parameter values stay live references, evaluated when the method runs.
    """
    args = [
        f'"{stmt.marker}"',
        _kv("event", f'"{stmt.event}"'),
        _kv("action", f'"{stmt.action}"'),
        _kv("class", f'"{stmt.class_name}"'),
        _kv("method", f'"{stmt.method}"'),
    ]
    args.extend(_kv(name, name) for name in stmt.params)
    return f"{config.LOGGER_FIELD}.info({', '.join(args)});"


def render_logger_field(class_name: str) -> str:
    # fully qualified so no import has to be added
    return (
        f"private static final {config.LOGGER_TYPE} {config.LOGGER_FIELD} = "
        f"{config.LOGGER_FACTORY}.getLogger({class_name}.class);"
    )


# ---------------- Transform ----------------

def _closing(unit: SourceUnit, close_indent: Optional[str]) -> str:
    # "{}" on one line: move the closing brace below the inserted line
    return "" if close_indent is None else unit.newline + close_indent


def plan_edits(unit: SourceUnit) -> Tuple[List[Edit], UnitResult]:
    """
    Pure transform step: decide every insertion for one unit without
    touching its text. Raises RuntimeError when a target body cannot be
    located, since instrumentation is all-or-nothing.
    """
    result = UnitResult(path=unit.path, code=unit.code)
    edits: List[Edit] = []

    for type_decl in unit.types:
        if not is_target_type(type_decl):
            continue

        if not has_logger_field(type_decl):
            if type_decl.member_anchor is None:
                raise RuntimeError(f"Cannot locate the body of {type_decl.name} in {unit.path}")
            text = type_decl.member_lead + unit.newline + type_decl.member_indent + render_logger_field(type_decl.name)
            text += _closing(unit, type_decl.close_indent)
            edits.append(Edit(offset=type_decl.member_anchor, text=text))
            result.loggers_added.append(type_decl.name)

        for method in type_decl.methods:
            if not is_eligible_method(method):
                continue

            if is_instrumented(method):
                result.skipped.append({"class": type_decl.name, "method": method.name})
                continue

            if method.body_open is None:
                raise RuntimeError(
                    f"Cannot locate the body of {type_decl.name}.{method.name} in {unit.path}"
                )

            stmt = build_log_statement(type_decl, method)
            text = unit.newline + method.body_indent + render_log_statement(stmt)
            text += _closing(unit, method.close_indent)
            edits.append(Edit(offset=method.body_open + 1, text=text))
            result.instrumented.append(
                {
                    "class": stmt.class_name,
                    "method": stmt.method,
                    "action": stmt.action,
                    "event": stmt.event,
                    "params": list(stmt.params),
                }
            )

    return edits, result


def apply_edits(code: str, edits: List[Edit]) -> str:
    # right to left so earlier offsets stay valid
    out = code
    for edit in sorted(edits, key=lambda e: e.offset, reverse=True):
        out = out[:edit.offset] + edit.text + out[edit.offset:]
    return out


def transform_unit(unit: SourceUnit, adapter: Optional[JavaAdapter] = None) -> UnitResult:
    edits, result = plan_edits(unit)
    if not edits:
        return result

    result.code = apply_edits(unit.code, edits)
    result.changed = True

    adapter = adapter or JavaAdapter()
    try:
        adapter.parse_to_ast(result.code, source_file=unit.path)
    except ValueError as e:
        raise RuntimeError(f"Instrumented {unit.path} is no longer valid Java: {e}") from e
    return result


def instrument_source(code: str, path: str = "<code>", adapter: Optional[JavaAdapter] = None) -> UnitResult:
    """
    Single-compilation-unit helper (used by /api/preview and the tests).
    """
    adapter = adapter or JavaAdapter()
    unit = adapter.parse_unit(code, path)
    return transform_unit(unit, adapter)


# ---------------- Tree level ----------------

def collect_java_files(root_dir: Path) -> List[Path]:
    """
    Find all .java files under root_dir (recursively), in a stable order.
    """
    return sorted(p for p in Path(root_dir).rglob("*.java") if p.is_file())


def instrument_tree(
    project_root: Path,
    subtree: str,
    staging_root: Path,
    adapter: Optional[JavaAdapter] = None,
) -> List[UnitResult]:
    """
    Parse every unit under project_root/subtree, transform the targets and
    write all units (changed or not) to staging_root at their path relative
    to project_root. Every unit is parsed before anything is written.
    """
    project_root = Path(project_root)
    staging_root = Path(staging_root)
    adapter = adapter or JavaAdapter()

    java_files = collect_java_files(project_root / subtree)
    print(f"==> Parsing {len(java_files)} Java files under {subtree} ...")

    units: List[SourceUnit] = []
    for path in java_files:
        rel = path.relative_to(project_root).as_posix()
        with open(path, "r", encoding="utf-8", newline="") as f:
            code = f.read()
        units.append(adapter.parse_unit(code, rel))

    results = [transform_unit(unit, adapter) for unit in units]

    for result in results:
        out = staging_root / result.path
        out.parent.mkdir(parents=True, exist_ok=True)
        with open(out, "w", encoding="utf-8", newline="") as f:
            f.write(result.code)

        for item in result.instrumented:
            print(f"  - {item['class']}.{item['method']} -> {item['action']} ({item['event']})")
        for item in result.skipped:
            print(f"  - {item['class']}.{item['method']} already instrumented, skipped")

    return results
