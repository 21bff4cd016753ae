"""Call graph of the crash path, rebuilt from trace frames and source files.

Only the chain of frames observed in one trace is modeled: each resolved frame
becomes a node linked to the previously resolved one. Sibling calls found in
function bodies are not added.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import FunctionNotFoundError, TraceMindError
from ..languages import language_for_path, support_for
from ..models import StackFrame, StackTrace
from .functions import FunctionDef, compute_complexity, find_function, find_function_at_line
from .source import GrammarProvider, SourceFile, TreeSitterGrammars, parse_source_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CallGraphConfig:
    """Which frames the builder considers."""

    include_stdlib: bool = False
    include_tests: bool = True
    max_nodes: int | None = None


@dataclass(eq=False, slots=True)
class CallNode:
    """One resolved function on the crash path.

    ``callers``/``callees`` are back-references into the owning CallGraph.
    """

    name: str
    file: str
    start_line: int
    end_line: int
    signature: str | None = None
    qualified_name: str | None = None
    complexity: int = 1
    frame_line: int = 0
    callers: list[CallNode] = field(default_factory=list, repr=False)
    callees: list[CallNode] = field(default_factory=list, repr=False)

    def add_callee(self, node: CallNode) -> bool:
        """Link ``self -> node``; False if the edge already existed."""
        if any(n is node for n in self.callees):
            return False
        self.callees.append(node)
        if not any(n is self for n in node.callers):
            node.callers.append(self)
        return True


@dataclass(slots=True)
class CallGraph:
    """Owns all nodes of one build."""

    nodes: list[CallNode] = field(default_factory=list)
    entry_point: CallNode | None = None
    edge_count: int = 0

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    def add_node(self, node: CallNode) -> CallNode:
        self.nodes.append(node)
        if self.entry_point is None:
            self.entry_point = node
        return node

    def link(self, caller: CallNode, callee: CallNode) -> bool:
        if caller.add_callee(callee):
            self.edge_count += 1
            return True
        return False


class CallGraphBuilder:
    """Per-request build session.

    Owns a cache of parsed source files keyed by absolute path; the cache lives
    until ``close()`` (or the end of a ``with`` block) and is never shared.
    """

    def __init__(
        self,
        repo_root: str | Path,
        provider: GrammarProvider | None = None,
        config: CallGraphConfig | None = None,
    ) -> None:
        self.repo_root = Path(repo_root)
        self.provider = provider or TreeSitterGrammars()
        self.config = config or CallGraphConfig()
        self._files: dict[Path, SourceFile] = {}
        self._failed: set[Path] = set()

    def __enter__(self) -> CallGraphBuilder:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._files.clear()
        self._failed.clear()

    @property
    def cached_files(self) -> int:
        return len(self._files)

    def resolve_path(self, file: str) -> Path:
        """Absolute path of a frame file (relative paths join the repo root)."""
        p = Path(file)
        if not p.is_absolute():
            p = self.repo_root / p
        return p.resolve()

    def get_file(self, path: str | Path) -> SourceFile:
        """Parse a source file once per session."""
        key = Path(path).resolve()
        cached = self._files.get(key)
        if cached is not None:
            return cached
        sf = parse_source_file(key, self.provider)
        self._files[key] = sf
        return sf

    def _skip_reason(self, frame: StackFrame) -> str | None:
        if not frame.file:
            return "no file"
        if frame.is_stdlib and not self.config.include_stdlib:
            return "stdlib"
        if frame.is_third_party:
            return "third-party"
        if not self.config.include_tests:
            support = support_for(language_for_path(frame.file))
            if support is not None and support.is_test_path(self._repo_relative(frame.file)):
                return "test file"
        return None

    def _repo_relative(self, file: str) -> str:
        # Directories above the repository root never make a file a test file.
        path = self.resolve_path(file)
        try:
            return str(path.relative_to(self.repo_root.resolve()))
        except ValueError:
            return path.name

    def resolve_frame(self, frame: StackFrame) -> tuple[SourceFile, FunctionDef] | None:
        """Locate the function a frame points at, or None if it cannot be resolved."""
        reason = self._skip_reason(frame)
        if reason is not None:
            logger.debug("Skipping frame %s:%d (%s)", frame.file, frame.line, reason)
            return None

        path = self.resolve_path(frame.file)
        if path in self._failed:
            return None
        try:
            sf = self.get_file(path)
        except TraceMindError as exc:
            logger.debug("Skipping unavailable file %s: %s", path, exc)
            self._failed.add(path)
            return None

        if frame.function:
            try:
                return sf, find_function(sf, frame.function, line=frame.line or None)
            except FunctionNotFoundError:
                pass
        try:
            return sf, find_function_at_line(sf, frame.line)
        except FunctionNotFoundError:
            logger.debug("Could not find function for frame %s:%d", frame.file, frame.line)
            return None

    def build(self, frames: StackTrace | Iterable[StackFrame]) -> CallGraph:
        """Build the linear crash-path graph from frames in order."""
        if isinstance(frames, StackTrace):
            frames = frames.frames

        graph = CallGraph()
        prev: CallNode | None = None
        for frame in frames:
            resolved = self.resolve_frame(frame)
            if resolved is None:
                continue
            sf, func = resolved
            node = graph.add_node(
                CallNode(
                    name=func.name,
                    file=frame.file or str(sf.path),
                    start_line=func.start_line,
                    end_line=func.end_line,
                    signature=func.signature,
                    qualified_name=func.qualified_name,
                    complexity=compute_complexity(sf, func),
                    frame_line=frame.line,
                )
            )
            if prev is not None:
                graph.link(prev, node)
            prev = node
            if self.config.max_nodes is not None and graph.node_count >= self.config.max_nodes:
                break

        logger.info("Built call graph with %d nodes and %d edges", graph.node_count, graph.edge_count)
        return graph


def build_call_graph(
    frames: StackTrace | Iterable[StackFrame],
    repo_root: str | Path,
    *,
    provider: GrammarProvider | None = None,
    config: CallGraphConfig | None = None,
) -> CallGraph:
    """One-shot build with its own session."""
    with CallGraphBuilder(repo_root, provider=provider, config=config) as builder:
        return builder.build(frames)


def find_repo_root(frames: Iterable[StackFrame], cwd: str | Path | None = None) -> Path | None:
    """Nearest ancestor with a ``.git`` entry of any absolute frame path.

    Falls back to ``cwd`` (default: the current directory) when it is a
    repository, else None.
    """
    for frame in frames:
        if not frame.file:
            continue
        p = Path(frame.file)
        if not p.is_absolute():
            continue
        for parent in p.parents:
            if (parent / ".git").exists():
                return parent

    base = Path(cwd) if cwd is not None else Path.cwd()
    if (base / ".git").exists():
        return base
    return None
