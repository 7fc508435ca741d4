import functools
import logging
import re
from pathlib import Path

from tree_sitter import Node, Query, QueryCursor
from tree_sitter_language_pack import get_language, get_parser

from cliche.core.errors import SourceUnparsableError
from cliche.models import FieldDecl, PackageDecl, TypeDecl

logger = logging.getLogger(__name__)

# Tool directives such as //go:generate or //nolint:all are not part of a doc comment.
_DIRECTIVE_RE = re.compile(r"^(?:[a-z0-9]+:[a-z0-9]|line |extern |export )")
_TERMINATORS = {"\n", ";"}


@functools.cache
def _load_query(query_type: str) -> Query:
    queries_dir = Path(__file__).parent.parent / "queries"
    query_path = queries_dir / f"go_{query_type}.scm"
    if not query_path.exists():
        raise FileNotFoundError(f"Query file not found: {query_path}")
    query_text = query_path.read_text(encoding="utf-8")
    return Query(get_language("go"), query_text)


def _comment_lines(raw: str) -> list[str]:
    if raw.startswith("//"):
        body = raw[2:]
        if _DIRECTIVE_RE.match(body):
            return []
        return [body[1:] if body.startswith(" ") else body]
    # /* ... */ block comment
    return raw[2:-2].splitlines()


def comment_text(comments: list[str]) -> str:
    """Render a group of raw Go comments as doc text.

    Comment markers and the space following ``//`` are removed, directive
    lines are dropped, and leading, trailing and repeated blank lines are
    collapsed.
    """
    lines: list[str] = []
    for raw in comments:
        lines.extend(line.rstrip() for line in _comment_lines(raw))

    out: list[str] = []
    for line in lines:
        if line == "" and (not out or out[-1] == ""):
            continue
        out.append(line)
    while out and out[-1] == "":
        out.pop()
    return "\n".join(out)


def _previous_token(node: Node) -> Node | None:
    sibling = node.prev_sibling
    while sibling is not None and not sibling.is_named and sibling.type in _TERMINATORS:
        sibling = sibling.prev_sibling
    return sibling


class GoDeclarationParser:
    """Extract package, type and field declarations from Go source with tree-sitter."""

    def __init__(self) -> None:
        self._parser = get_parser("go")

    def parse(self, source: bytes, filename: str = "<source>") -> PackageDecl:
        try:
            source.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SourceUnparsableError(f"{filename}: source is not valid UTF-8: {exc}") from exc

        tree = self._parser.parse(source)
        root = tree.root_node
        if root.has_error:
            raise SourceUnparsableError(f"{filename}: source contains syntax errors")

        package_name: str | None = None
        package_doc = ""
        types: list[tuple[int, TypeDecl]] = []

        cursor = QueryCursor(_load_query("declarations"))
        for _, captures in cursor.matches(root):
            if "package" in captures:
                package_name = self._text(source, captures["package.name"][0])
                package_doc = self._doc(source, captures["package"][0])
            elif "type.spec" in captures:
                types.append(
                    self._type(
                        source,
                        captures["type.decl"][0],
                        captures["type.spec"][0],
                        captures["type.name"][0],
                        captures["type.body"][0],
                    )
                )

        if package_name is None:
            raise SourceUnparsableError(f"{filename}: missing package clause")

        types.sort(key=lambda t: t[0])
        logger.debug("Parsed package %s from %s with %d type(s)", package_name, filename, len(types))
        return PackageDecl(name=package_name, doc=package_doc, types=tuple(t for _, t in types))

    # -- helpers -------------------------------------------------------------

    @staticmethod
    def _text(source: bytes, node: Node) -> str:
        return source[node.start_byte : node.end_byte].decode("utf-8")

    def _doc(self, source: bytes, node: Node) -> str:
        """Return the doc comment group directly above ``node``."""
        comments: list[str] = []
        next_row = node.start_point[0]
        sibling = _previous_token(node)
        while sibling is not None and sibling.type == "comment":
            if sibling.end_point[0] < next_row - 1:
                break
            previous = _previous_token(sibling)
            if previous is not None and previous.type != "comment" and previous.end_point[0] == sibling.start_point[0]:
                # Trailing comment of the previous line, never a doc comment.
                break
            comments.append(self._text(source, sibling))
            next_row = sibling.start_point[0]
            sibling = _previous_token(sibling)
        comments.reverse()
        return comment_text(comments)

    def _type(self, source: bytes, decl: Node, spec: Node, name: Node, body: Node) -> tuple[int, TypeDecl]:
        doc = self._doc(source, spec)
        if not doc and sum(1 for c in decl.named_children if c.type == "type_spec") == 1:
            doc = self._doc(source, decl)

        fields: tuple[FieldDecl, ...] | None = None
        if body.type == "struct_type":
            field_list = next((c for c in body.named_children if c.type == "field_declaration_list"), None)
            fields = ()
            if field_list is not None:
                fields = tuple(
                    self._field(source, child)
                    for child in field_list.named_children
                    if child.type == "field_declaration"
                )

        return spec.start_byte, TypeDecl(
            name=self._text(source, name),
            doc=doc,
            kind=body.type,
            fields=fields,
        )

    def _field(self, source: bytes, node: Node) -> FieldDecl:
        names = tuple(self._text(source, n) for n in node.children_by_field_name("name"))
        type_node = node.child_by_field_name("type")
        tag_node = node.child_by_field_name("tag")

        if type_node is None:
            type_text = ""
        elif names:
            type_text = self._text(source, type_node)
        else:
            # Embedded fields keep their pointer marker.
            type_text = source[node.start_byte : type_node.end_byte].decode("utf-8")

        return FieldDecl(
            names=names,
            doc=self._doc(source, node),
            tag=self._text(source, tag_node) if tag_node is not None else None,
            type=type_text,
        )
