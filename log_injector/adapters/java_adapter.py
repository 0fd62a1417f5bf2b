import tree_sitter_java
from tree_sitter import Language, Node, Parser
from typing import Callable, Dict, List, Optional, Tuple

from ..cir.model import MethodDecl, ParameterDecl, SourceUnit, TypeDecl

JAVA_LANGUAGE = Language(tree_sitter_java.language())

class JavaAdapter:
    """
    Java → SourceUnit builder.
    Parses one compilation unit with tree-sitter (no classpath, simple type
    names only) and records, for every class/interface/enum/record (nested
    ones included):
      - simple name, kind, modifiers, field names
      - methods with visibility, parameters, body presence
      - the source text of each method's first body statement
      - source offsets of class and method bodies, so that statements
        can be spliced into the original text without reprinting it

    Parse failures raise ValueError; nothing is skipped silently.
    """

    language = "java"

    TYPE_KINDS: Dict[str, str] = {
        "class_declaration": "class",
        "interface_declaration": "interface",
        "enum_declaration": "enum",
        "record_declaration": "record",
    }

    COMMENT_TYPES = ("line_comment", "block_comment")

    def __init__(self):
        self._parser = Parser(JAVA_LANGUAGE)

    # ---------------- Helpers ----------------

    def _visibility_from_mods(self, mods: set[str] | None) -> str:
        mods = mods or set()
        if "public" in mods:
            return "public"
        if "private" in mods:
            return "private"
        if "protected" in mods:
            return "protected"
        return "package"

    def _modifiers(self, node: Node) -> set[str]:
        # keywords are anonymous children of the modifiers node, annotations are named
        for child in node.children:
            if child.type == "modifiers":
                return {c.type for c in child.children if not c.is_named}
        return set()

    def _text(self, node: Node) -> str:
        return node.text.decode("utf-8")

    def _simple_type_name(self, t: Optional[Node], varargs: bool = False) -> str:
        """
        Last segment of the declared type, without resolution:
        java.lang.Long -> Long, List<Long> -> List, Long[] / Long... -> Long[]
        """
        if t is None:
            return "void"

        dims = 1 if varargs else 0
        while t.type in ("array_type", "generic_type", "scoped_type_identifier", "annotated_type"):
            if t.type == "array_type":
                dims += self._text(t.child_by_field_name("dimensions")).count("[")
                t = t.child_by_field_name("element")
            elif t.type == "scoped_type_identifier":
                t = [c for c in t.named_children if c.type == "type_identifier"][-1]
            else:
                t = [c for c in t.named_children if c.type not in ("type_arguments", "annotation", "marker_annotation")][0]

        name = self._text(t).rsplit(".", 1)[-1]
        return name + "[]" * dims

    def _line_indent(self, code: str, offset: int) -> str:
        start = code.rfind("\n", 0, offset) + 1
        end = start
        while end < len(code) and code[end] in " \t":
            end += 1
        return code[start:end]

    def _next_token(self, anchor: Node) -> Optional[Node]:
        node = anchor
        while True:
            sibling = node.next_sibling
            while sibling is not None and sibling.type in self.COMMENT_TYPES:
                sibling = sibling.next_sibling
            # an enum's ";" ends its own node, the closing brace belongs to the body
            if sibling is not None or node.parent is None or node.parent.type != "enum_body_declarations":
                return sibling
            node = node.parent

    def _block_layout(
        self, code: str, at: Callable[[int], int], anchor: Node, brace: Node
    ) -> Tuple[str, Optional[str]]:
        """
        Layout for a line inserted right after anchor (a "{" or an enum's ";"):
          - indent: that of the first line after the anchor when the block
            already has content on its own line, one level deeper otherwise
          - close_indent: the block's own indentation when the block closes
            on the anchor's line, so the closing brace can be moved down
        """
        nxt = self._next_token(anchor)
        end = at(anchor.end_byte)
        on_new_line = nxt is not None and "\n" in code[end:at(nxt.start_byte)]

        if nxt is not None and nxt.type != "}" and on_new_line:
            return self._line_indent(code, at(nxt.start_byte)), None

        outer = self._line_indent(code, at(brace.start_byte))
        unit = "\t" if outer.startswith("\t") else "    "
        close_indent = outer if nxt is not None and nxt.type == "}" and not on_new_line else None
        return outer + unit, close_indent

    def _offset_mapper(self, code: str, data: bytes) -> Callable[[int], int]:
        """
        tree-sitter reports byte offsets; edits are applied to the str.
        """
        if len(data) == len(code):
            return lambda b: b
        return lambda b: len(data[:b].decode("utf-8"))

    def _first_error(self, node: Node) -> Optional[Node]:
        stack = [node]
        while stack:
            current = stack.pop()
            if current.type == "ERROR" or current.is_missing:
                return current
            if current.has_error:
                stack.extend(reversed(current.children))
        return None

    def _walk_types(self, node: Node):
        stack = [node]
        while stack:
            current = stack.pop()
            if current.type in self.TYPE_KINDS:
                yield current
            stack.extend(reversed(current.named_children))

    # ---------------- Parsing entry points ----------------

    def parse_to_ast(self, code: str, source_file: str | None = None):
        where = source_file or "<code>"
        tree = self._parser.parse(code.encode("utf-8"))
        if tree.root_node.has_error:
            bad = self._first_error(tree.root_node) or tree.root_node
            what = f"missing {bad.type!r}" if bad.is_missing else "unexpected input"
            raise ValueError(f"Java syntax error in {where} (line {bad.start_point[0] + 1}): {what}")
        return tree

    def parse_unit(self, code: str, path: str = "<code>") -> SourceUnit:
        """
        Parse one compilation unit into a SourceUnit carrying every type
        declaration and the offsets needed to splice new statements in.
        """
        data = code.encode("utf-8")
        tree = self.parse_to_ast(code, path)
        at = self._offset_mapper(code, data)
        root = tree.root_node

        package_name = None
        for child in root.named_children:
            if child.type == "package_declaration":
                names = [c for c in child.named_children if c.type in ("scoped_identifier", "identifier")]
                package_name = self._text(names[0]) if names else None

        unit = SourceUnit(
            path=path,
            code=code,
            package=package_name,
            newline="\r\n" if "\r\n" in code else "\n",
        )

        for t in self._walk_types(root):
            unit.types.append(self._type_decl(t, package_name, code, at))

        return unit

    def _type_decl(self, t: Node, package_name: Optional[str], code: str, at) -> TypeDecl:
        type_decl = TypeDecl(
            name=self._text(t.child_by_field_name("name")),
            kind=self.TYPE_KINDS[t.type],
            package=package_name,
            modifiers=tuple(sorted(self._modifiers(t))),
        )

        body = t.child_by_field_name("body")
        members = list(body.named_children)
        anchor = body.children[0]
        lead = ""

        if t.type == "enum_declaration":
            # members may only follow the constant list and its ";"
            decls = [c for c in members if c.type == "enum_body_declarations"]
            if decls:
                anchor = decls[0].children[0]
                members = list(decls[0].named_children)
            else:
                tail = [c for c in body.children[1:-1] if c.type not in self.COMMENT_TYPES]
                anchor = tail[-1] if tail else anchor
                lead = ";"
                members = []

        field_names: List[str] = []
        if t.type == "record_declaration":
            params = t.child_by_field_name("parameters")
            for p in params.named_children:
                name = p.child_by_field_name("name")
                if name is not None:
                    field_names.append(self._text(name))
        for member in members:
            if member.type == "field_declaration":
                for decl in member.children_by_field_name("declarator"):
                    field_names.append(self._text(decl.child_by_field_name("name")))
        type_decl.field_names = tuple(field_names)

        type_decl.body_open = at(body.children[0].start_byte)
        type_decl.member_anchor = at(anchor.end_byte)
        type_decl.member_lead = lead
        type_decl.member_indent, type_decl.close_indent = self._block_layout(code, at, anchor, body.children[0])

        for member in members:
            if member.type == "method_declaration":
                type_decl.methods.append(self._method_decl(member, code, at))

        return type_decl

    def _parameters(self, params: Node) -> List[ParameterDecl]:
        out: List[ParameterDecl] = []
        for p in params.named_children:
            if p.type == "formal_parameter":
                type_name = self._simple_type_name(p.child_by_field_name("type"))
                dims = p.child_by_field_name("dimensions")
                if dims is not None:
                    type_name += "[]" * self._text(dims).count("[")
                out.append(ParameterDecl(name=self._text(p.child_by_field_name("name")), type_name=type_name))
            elif p.type == "spread_parameter":
                type_node = next(c for c in p.named_children if c.type not in ("modifiers", "variable_declarator"))
                declarator = next(c for c in p.named_children if c.type == "variable_declarator")
                out.append(
                    ParameterDecl(
                        name=self._text(declarator.child_by_field_name("name")),
                        type_name=self._simple_type_name(type_node, varargs=True),
                    )
                )
        return out

    def _method_decl(self, m: Node, code: str, at) -> MethodDecl:
        mods = self._modifiers(m)
        body = m.child_by_field_name("body")
        method = MethodDecl(
            name=self._text(m.child_by_field_name("name")),
            visibility=self._visibility_from_mods(mods),
            modifiers=tuple(sorted(mods)),
            parameters=self._parameters(m.child_by_field_name("parameters")),
            has_body=body is not None,
            is_abstract="abstract" in mods,
        )

        if body is not None:
            statements = [c for c in body.named_children if c.type not in self.COMMENT_TYPES]
            if statements:
                method.first_statement = self._text(statements[0])
            brace = body.children[0]
            method.body_open = at(brace.start_byte)
            method.body_indent, method.close_indent = self._block_layout(code, at, brace, brace)

        return method
