from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from tracemind.core.analyzer import analyze
from tracemind.core.code import (
    CallGraphBuilder,
    CallGraphConfig,
    CallNode,
    TreeSitterGrammars,
    build_call_graph,
    find_repo_root,
)
from tracemind.core.code.source import SyntaxNode
from tracemind.core.models import AnalysisMode, Language, StackFrame

MAIN_PY = """\
from app import service


def main():
    return service.run(3)
"""

SERVICE_PY = """\
def run(n):
    if n > 2:
        return explode(n)
    return n


def explode(n):
    raise ValueError(n)
"""


class CountingGrammars(TreeSitterGrammars):
    def __init__(self) -> None:
        super().__init__()
        self.calls = 0

    def parse(self, language: Language, source: bytes) -> SyntaxNode:
        self.calls += 1
        return super().parse(language, source)


@pytest.fixture
def repo(write_source: Callable[[str, str], Path], tmp_path: Path) -> Path:
    write_source("app/main.py", MAIN_PY)
    write_source("app/service.py", SERVICE_PY)
    write_source("tests/test_app.py", "def test_main():\n    assert True\n")
    return tmp_path


def _frames(repo: Path) -> list[StackFrame]:
    return [
        StackFrame(function="main", file=str(repo / "app/main.py"), line=5),
        StackFrame(function="run", file=str(repo / "app/service.py"), line=3),
        StackFrame(function="explode", file=str(repo / "app/service.py"), line=8),
    ]


def _names(nodes: list[CallNode]) -> list[str]:
    return [n.name for n in nodes]


def test_frames_are_linked_in_order(repo: Path) -> None:
    grammars = CountingGrammars()
    with CallGraphBuilder(repo, provider=grammars) as builder:
        graph = builder.build(_frames(repo))
        assert builder.cached_files == 2
    assert builder.cached_files == 0
    assert grammars.calls == 2

    assert _names(graph.nodes) == ["main", "run", "explode"]
    assert graph.entry_point is graph.nodes[0]
    assert graph.edge_count == 2
    main, run, explode = graph.nodes
    assert _names(main.callees) == ["run"]
    assert _names(run.callers) == ["main"]
    assert _names(run.callees) == ["explode"]
    assert explode.callees == []

    assert (run.start_line, run.end_line) == (1, 4)
    assert run.signature == "run(n)"
    assert run.complexity == 2
    assert run.frame_line == 3
    assert explode.file == str(repo / "app/service.py")


def test_unresolvable_frames_are_skipped(repo: Path) -> None:
    frames = [
        StackFrame(function="main", file=str(repo / "app/main.py"), line=5),
        StackFrame(function="x", file=None, line=1),
        StackFrame(function="load", file=str(repo / "gone.py"), line=1),
        StackFrame(function="load", file=str(repo / "gone.py"), line=2),
        StackFrame(function="dumps", file=str(repo / "app/service.py"), line=1, is_stdlib=True),
        StackFrame(function="get", file=str(repo / "app/service.py"), line=1, is_third_party=True),
        StackFrame(function="explode", file="app/service.py", line=8),
    ]
    graph = build_call_graph(frames, repo)
    assert _names(graph.nodes) == ["main", "explode"]
    assert _names(graph.nodes[0].callees) == ["explode"]
    # Relative frame paths are resolved against the repo but reported as given.
    assert graph.nodes[1].file == "app/service.py"


def test_config_includes_stdlib_and_excludes_tests(repo: Path) -> None:
    frames = [
        StackFrame(function="run", file=str(repo / "app/service.py"), line=3, is_stdlib=True),
        StackFrame(function="test_main", file=str(repo / "tests/test_app.py"), line=2),
    ]
    graph = build_call_graph(frames, repo, config=CallGraphConfig(include_stdlib=True))
    assert _names(graph.nodes) == ["run", "test_main"]

    config = CallGraphConfig(include_stdlib=True, include_tests=False)
    graph = build_call_graph(frames, repo, config=config)
    assert _names(graph.nodes) == ["run"]


def test_test_paths_are_relative_to_repo_root(
    write_source: Callable[[str, str], Path], tmp_path: Path
) -> None:
    write_source("tests/proj/app/svc.py", "def run():\n    return 1\n")
    write_source("tests/proj/tests/helpers.py", "def make():\n    return 2\n")
    write_source("tests/proj/tests/test_svc.py", "def test_run():\n    assert True\n")
    repo = tmp_path / "tests" / "proj"
    frames = [
        StackFrame(function="run", file=str(repo / "app/svc.py"), line=2),
        StackFrame(function="make", file="tests/helpers.py", line=2),
        StackFrame(function="test_run", file=str(repo / "tests/test_svc.py"), line=2),
    ]

    graph = build_call_graph(frames, repo)
    assert _names(graph.nodes) == ["run", "make", "test_run"]
    assert graph.edge_count == 2

    # A checkout below a "tests" directory is not itself a test file.
    graph = build_call_graph(frames, repo, config=CallGraphConfig(include_tests=False))
    assert _names(graph.nodes) == ["run"]


def test_go_frames_resolve_by_name(
    write_source: Callable[[str, str], Path], tmp_path: Path
) -> None:
    write_source(
        "cmd/main.go",
        "package main\n\nfunc main() {\n\tprocess()\n}\n\nfunc process() {\n\tpanic(\"x\")\n}\n",
    )
    main_go = str(tmp_path / "cmd/main.go")
    # Line numbers outside any function: only the name can resolve these.
    frames = [
        StackFrame(function="main.main", file=main_go, line=99),
        StackFrame(function="main.process", file=main_go, line=99),
    ]
    graph = build_call_graph(frames, tmp_path)
    assert _names(graph.nodes) == ["main", "process"]
    assert graph.nodes[1].start_line == 7


def test_max_nodes(repo: Path) -> None:
    graph = build_call_graph(_frames(repo), repo, config=CallGraphConfig(max_nodes=2))
    assert _names(graph.nodes) == ["main", "run"]
    assert graph.edge_count == 1


def test_unknown_function_name_falls_back_to_line(repo: Path) -> None:
    frames = [StackFrame(function="<module>", file=str(repo / "app/main.py"), line=5)]
    graph = build_call_graph(frames, repo)
    assert _names(graph.nodes) == ["main"]
    assert graph.nodes[0].qualified_name == "main"


def test_build_is_deterministic(repo: Path) -> None:
    first = build_call_graph(_frames(repo), repo)
    second = build_call_graph(_frames(repo), repo)
    assert [(n.name, n.start_line, n.complexity) for n in first.nodes] == [
        (n.name, n.start_line, n.complexity) for n in second.nodes
    ]
    assert first.edge_count == second.edge_count


def test_duplicate_edges_are_ignored() -> None:
    a = CallNode(name="a", file="a.py", start_line=1, end_line=2)
    b = CallNode(name="b", file="a.py", start_line=3, end_line=4)
    assert a.add_callee(b)
    assert not a.add_callee(b)
    assert b.callers == [a]


def test_find_repo_root(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    other = tmp_path / "other"
    other.mkdir()

    frames = [
        StackFrame(function="f", file="relative.py", line=1),
        StackFrame(function="g", file=str(repo / "pkg" / "mod.py"), line=1),
    ]
    assert find_repo_root(frames, cwd=other) == repo
    assert find_repo_root(frames[:1], cwd=repo) == repo
    assert find_repo_root(frames[:1], cwd=other) is None


def test_analyze_builds_graph_for_traces(repo: Path) -> None:
    main, service = repo / "app/main.py", repo / "app/service.py"
    trace = "\n".join(
        [
            "Traceback (most recent call last):",
            f'  File "{main}", line 5, in main',
            "    return service.run(3)",
            f'  File "{service}", line 3, in run',
            "    return explode(n)",
            f'  File "{service}", line 8, in explode',
            "    raise ValueError(n)",
            "ValueError: 3",
        ]
    )
    result = analyze(trace, repo_root=repo)
    assert result.mode == AnalysisMode.TRACE
    assert result.repo_root == repo
    assert result.call_graph is not None
    assert _names(result.call_graph.nodes) == ["main", "run", "explode"]
    assert result.analysis_time_ms >= 0.0


def test_analyze_logs_have_no_graph(repo: Path) -> None:
    result = analyze("ERROR disk full\nINFO retry", repo_root=repo)
    assert result.mode == AnalysisMode.LOG
    assert result.call_graph is None
