from __future__ import annotations

from pathlib import PurePosixPath
from typing import Callable, List, Tuple

from . import config
from .cir.model import Action, MethodDecl, ParameterDecl, TypeDecl


# Ordered (predicate, action) pairs over the lower-cased method name.
# First match wins, so the substring rule must stay ahead of the prefix rules
# (findMostExpensiveProduct is SPECIAL, not READ).
ACTION_RULES: List[Tuple[Callable[[str], bool], Action]] = [
    (lambda n: config.EXPENSIVE_MARKER in n, "SPECIAL"),
    (lambda n: n.startswith(config.READ_PREFIXES), "READ"),
    (lambda n: n.startswith(config.WRITE_PREFIXES), "WRITE"),
]

# Unmatched names are treated as reads; there is no OTHER category.
DEFAULT_ACTION: Action = "READ"


def classify_action(method_name: str) -> Tuple[Action, str]:
    """
    Returns (action, event) for a method simple name.
    """
    n = (method_name or "").lower()
    action = DEFAULT_ACTION
    for predicate, candidate in ACTION_RULES:
        if predicate(n):
            action = candidate
            break
    return action, config.EVENTS[action]


def is_target_type(type_decl: TypeDecl) -> bool:
    return type_decl.is_concrete and type_decl.name.endswith(config.SERVICE_SUFFIX)


def is_eligible_method(method: MethodDecl) -> bool:
    return method.has_body and method.visibility == "public" and not method.is_abstract


def is_instrumented(method: MethodDecl) -> bool:
    return method.first_statement is not None and config.MARKER in method.first_statement


def is_loggable_parameter(param: ParameterDecl) -> bool:
    return (
        param.name.lower().endswith(config.ID_SUFFIX)
        and param.type_name in config.LOGGABLE_TYPES
    )


def loggable_parameters(method: MethodDecl) -> List[str]:
    return [p.name for p in method.parameters if is_loggable_parameter(p)]


def has_logger_field(type_decl: TypeDecl) -> bool:
    return config.LOGGER_FIELD in type_decl.field_names


def is_instrumentation_target(rel_path: str) -> bool:
    """Default merge predicate: file name carries the service marker suffix."""
    return PurePosixPath(rel_path).name.endswith(config.SERVICE_FILE_SUFFIX)
