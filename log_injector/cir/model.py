from dataclasses import dataclass, field
from typing import List, Literal, Optional, Tuple

Visibility = Literal["public", "protected", "private", "package"]
Action = Literal["READ", "WRITE", "SPECIAL"]

@dataclass
class ParameterDecl:
    name: str
    type_name: str            # simple declared type (e.g. Long, String[])

@dataclass
class MethodDecl:
    name: str
    visibility: Visibility = "package"
    modifiers: Tuple[str, ...] = ()
    parameters: List[ParameterDecl] = field(default_factory=list)
    has_body: bool = False
    is_abstract: bool = False
    first_statement: Optional[str] = None   # textual form of body[0]
    body_open: Optional[int] = None         # offset of the body "{"
    body_indent: str = ""                   # indentation of a new first statement
    close_indent: Optional[str] = None      # set when the body is "{}" on one line

@dataclass
class TypeDecl:
    name: str
    kind: Literal["class", "interface", "enum", "record"]
    package: Optional[str] = None
    modifiers: Tuple[str, ...] = ()
    field_names: Tuple[str, ...] = ()
    methods: List[MethodDecl] = field(default_factory=list)
    body_open: Optional[int] = None         # offset of the class body "{"
    member_anchor: Optional[int] = None     # where a new first member is inserted
    member_lead: str = ""                   # ";" when an enum has no constant terminator yet
    member_indent: str = ""                 # indentation of a new first member
    close_indent: Optional[str] = None      # set when the body is "{}" on one line

    @property
    def is_concrete(self) -> bool:
        return self.kind in ("class", "enum", "record") and "abstract" not in self.modifiers

@dataclass
class SourceUnit:
    path: str                 # relative to the project root, posix separators
    code: str
    package: Optional[str] = None
    types: List[TypeDecl] = field(default_factory=list)
    newline: str = "\n"

@dataclass(frozen=True)
class LogStatement:
    marker: str
    event: str
    action: Action
    class_name: str
    method: str
    params: Tuple[str, ...] = ()

@dataclass(frozen=True)
class Edit:
    offset: int               # insertion point in the original code
    text: str
