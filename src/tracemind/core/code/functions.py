"""Function definitions, call sites and complexity from a parsed source file."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from ..errors import FunctionNotFoundError, UnsupportedLanguageError
from ..languages import LanguageSupport, support_for
from .source import SourceFile, SyntaxNode

MEMBER_EXPRESSION_TYPES = frozenset({"attribute", "member_expression", "selector_expression"})

DECISION_POINT_TYPES = frozenset(
    {
        "if_statement",
        "elif_clause",
        "for_statement",
        "while_statement",
        "for_in_statement",
        "try_statement",
        "except_clause",
        "case_clause",
        "switch_statement",
        "conditional_expression",
        "ternary_expression",
        "boolean_operator",
        "and_expression",
        "or_expression",
        "&&",
        "||",
    }
)


@dataclass(frozen=True, slots=True)
class FunctionDef:
    """A function or method definition (lines are 1-based)."""

    name: str
    qualified_name: str
    signature: str
    start_line: int
    end_line: int
    start_column: int
    end_column: int
    node: SyntaxNode = field(repr=False, compare=False)

    @property
    def span(self) -> int:
        return self.end_line - self.start_line

    def contains_line(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line


@dataclass(frozen=True, slots=True)
class CallSite:
    """A call expression inside a function body."""

    callee_name: str
    line: int
    column: int
    node: SyntaxNode = field(repr=False, compare=False)


def _support(source_file: SourceFile) -> LanguageSupport:
    support = support_for(source_file.language)
    if support is None:
        raise UnsupportedLanguageError(f"No grammar for language: {source_file.language.value}")
    return support


def _go_receiver_type(source_file: SourceFile, node: SyntaxNode) -> str | None:
    receiver = node.child_by_field_name("receiver")
    if receiver is None:
        return None
    stack = [receiver]
    while stack:
        n = stack.pop()
        if n.type == "type_identifier":
            return source_file.text(n)
        stack.extend(reversed(n.children))
    return None


def _iter_scoped(
    source_file: SourceFile, support: LanguageSupport
) -> Iterator[tuple[SyntaxNode, tuple[str, ...]]]:
    """Pre-order walk yielding (node, enclosing class names)."""
    stack: list[tuple[SyntaxNode, tuple[str, ...]]] = [(source_file.root, ())]
    while stack:
        node, scope = stack.pop()
        yield node, scope
        child_scope = scope
        if node.type in support.class_types:
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                child_scope = (*scope, source_file.text(name_node))
        stack.extend((child, child_scope) for child in reversed(node.children))


def extract_functions(source_file: SourceFile) -> list[FunctionDef]:
    """Return every function definition in document order."""
    support = _support(source_file)
    out: list[FunctionDef] = []
    for node, scope in _iter_scoped(source_file, support):
        if node.type not in support.function_types:
            continue
        name_node = node.child_by_field_name("name")
        if name_node is None:
            continue
        name = source_file.text(name_node)

        owner = scope
        if node.type == "method_declaration":
            receiver = _go_receiver_type(source_file, node)
            owner = (receiver,) if receiver else ()
        qualified = ".".join((*owner, name))

        params = node.child_by_field_name("parameters")
        signature = name + (source_file.text(params) if params is not None else "()")

        out.append(
            FunctionDef(
                name=name,
                qualified_name=qualified,
                signature=signature,
                start_line=node.start_point[0] + 1,
                end_line=node.end_point[0] + 1,
                start_column=node.start_point[1],
                end_column=node.end_point[1],
                node=node,
            )
        )
    return out


def frame_name_candidates(name: str) -> list[str]:
    """Names a trace frame may refer to, most specific first.

    Package-qualified names also yield the receiver-qualified and bare forms:
    ``github.com/acme/svc.(*Server).Handle`` gives ``Server.Handle`` and
    ``Handle``; ``UserService.getUser`` gives ``getUser``.
    """
    out = [name]
    _, dot, rest = name.rpartition("/")[2].partition(".")
    if dot:
        rest = rest.replace("(*", "").replace("(", "").replace(")", "")
        for candidate in (rest, rest.rpartition(".")[2]):
            if candidate and candidate not in out:
                out.append(candidate)
    return out


def find_function(source_file: SourceFile, name: str, *, line: int | None = None) -> FunctionDef:
    """Find a function whose name or qualified name equals ``name``.

    Stripped forms from ``frame_name_candidates`` are tried in order when the
    full name misses. When several match and ``line`` is given, the one
    containing that line wins; otherwise the first in document order.
    """
    functions = extract_functions(source_file)
    matches: list[FunctionDef] = []
    for candidate in frame_name_candidates(name):
        matches = [f for f in functions if candidate in (f.name, f.qualified_name)]
        if matches:
            break
    if not matches:
        raise FunctionNotFoundError(f"Function {name!r} not found in {source_file.path}")
    if line is not None:
        for f in matches:
            if f.contains_line(line):
                return f
    return matches[0]


def find_function_at_line(source_file: SourceFile, line: int) -> FunctionDef:
    """Innermost function whose line range contains ``line`` (smallest span wins)."""
    best: FunctionDef | None = None
    for f in extract_functions(source_file):
        if f.contains_line(line) and (best is None or f.span < best.span):
            best = f
    if best is None:
        raise FunctionNotFoundError(f"No function contains line {line} of {source_file.path}")
    return best


def _iter_window(root: SyntaxNode, start_line: int, end_line: int) -> Iterator[SyntaxNode]:
    """Yield nodes starting inside [start_line, end_line], pruning subtrees outside it."""
    stack = [root]
    while stack:
        node = stack.pop()
        first = node.start_point[0] + 1
        last = node.end_point[0] + 1
        if first > end_line or last < start_line:
            continue
        if first >= start_line:
            yield node
        stack.extend(reversed(node.children))


def _callee_name(source_file: SourceFile, call: SyntaxNode) -> str | None:
    fn = call.child_by_field_name("function")
    if fn is None:
        return None
    if fn.type == "identifier":
        return source_file.text(fn)
    if fn.type in MEMBER_EXPRESSION_TYPES and fn.children:
        return source_file.text(fn.children[-1])
    return None


def extract_call_sites(source_file: SourceFile, func: FunctionDef) -> list[CallSite]:
    """Calls made between the function's first and last line."""
    support = _support(source_file)
    sites: list[CallSite] = []
    for node in _iter_window(source_file.root, func.start_line, func.end_line):
        if node.type not in support.call_types:
            continue
        callee = _callee_name(source_file, node)
        if callee is None:
            continue
        sites.append(
            CallSite(
                callee_name=callee,
                line=node.start_point[0] + 1,
                column=node.start_point[1],
                node=node,
            )
        )
    return sites


def compute_complexity(source_file: SourceFile, func: FunctionDef) -> int:
    """Cyclomatic complexity: 1 + decision points within the function's lines.

    Decision points are the node kinds in ``DECISION_POINT_TYPES``. Besides the
    branch and loop statements this includes tree-sitter-python's
    ``boolean_operator`` (one per ``and``/``or``), so Python boolean chains
    count the same way as the ``&&``/``||`` tokens of Go and JavaScript.
    """
    return 1 + sum(
        1
        for node in _iter_window(source_file.root, func.start_line, func.end_line)
        if node.type in DECISION_POINT_TYPES
    )


def extract_imports(source_file: SourceFile) -> list[str]:
    """Text of every import statement in the file."""
    support = _support(source_file)
    out: list[str] = []
    stack = [source_file.root]
    while stack:
        node = stack.pop()
        if node.type in support.import_types:
            out.append(source_file.text(node))
            continue
        stack.extend(reversed(node.children))
    return out
