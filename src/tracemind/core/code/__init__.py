"""Source-level analysis: syntax trees, functions, call sites and the crash-path graph."""

from __future__ import annotations

from .callgraph import (
    CallGraph,
    CallGraphBuilder,
    CallGraphConfig,
    CallNode,
    build_call_graph,
    find_repo_root,
)
from .functions import (
    CallSite,
    FunctionDef,
    compute_complexity,
    extract_call_sites,
    extract_functions,
    extract_imports,
    find_function,
    find_function_at_line,
    frame_name_candidates,
)
from .source import GrammarProvider, SourceFile, SyntaxNode, TreeSitterGrammars, parse_source_file

__all__ = [
    "CallGraph",
    "CallGraphBuilder",
    "CallGraphConfig",
    "CallNode",
    "CallSite",
    "FunctionDef",
    "GrammarProvider",
    "SourceFile",
    "SyntaxNode",
    "TreeSitterGrammars",
    "build_call_graph",
    "compute_complexity",
    "extract_call_sites",
    "extract_functions",
    "extract_imports",
    "find_function",
    "find_function_at_line",
    "find_repo_root",
    "frame_name_candidates",
    "parse_source_file",
]
