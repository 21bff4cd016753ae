"""One analysis request: unified parse, then the crash-path graph when possible."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from .code import CallGraph, CallGraphConfig, GrammarProvider, build_call_graph, find_repo_root
from .models import AnalysisMode, InputFormat, ParseResult
from .structured import GCP_LOG_FIELDS, LogFieldMap
from .unified import unified_parse

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Parse result plus the optional call graph and timing."""

    parsed: ParseResult
    call_graph: CallGraph | None = None
    repo_root: Path | None = None
    analysis_time_ms: float = 0.0

    @property
    def mode(self) -> AnalysisMode:
        return self.parsed.mode


def analyze(
    content: str | bytes | None,
    *,
    repo_root: str | Path | None = None,
    format_hint: InputFormat = InputFormat.AUTO,
    fields: LogFieldMap = GCP_LOG_FIELDS,
    provider: GrammarProvider | None = None,
    config: CallGraphConfig | None = None,
) -> AnalysisResult:
    """Parse input and, for stack traces, rebuild the crash path from source.

    Without an explicit ``repo_root`` the repository is located from the
    trace's absolute paths (or the current directory).
    """
    started = time.perf_counter()
    parsed = unified_parse(content, format_hint, fields=fields)

    graph = None
    root: Path | None = Path(repo_root) if repo_root is not None else None
    if parsed.trace is not None:
        if root is None:
            root = find_repo_root(parsed.trace.frames)
        if root is not None:
            graph = build_call_graph(parsed.trace, root, provider=provider, config=config)
        else:
            logger.info("No repository root found; skipping call graph")

    elapsed = (time.perf_counter() - started) * 1000.0
    return AnalysisResult(parsed=parsed, call_graph=graph, repo_root=root, analysis_time_ms=elapsed)
