"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: trace parsing, log analysis and call-graph reconstruction
- Resources: help text, field tables, schemas and a sample trace

Run locally (stdio):
    python -m tracemind
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from tracemind.resources.registry import register_resources
from tracemind.tools.analyze import analyze_input_impl, call_graph_impl, parse_trace_impl

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure logging to stderr; stdout carries the MCP transport."""
    level_name = os.getenv("TRACEMIND_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


mcp = FastMCP("tracemind", json_response=True)

register_resources(mcp)


@mcp.tool()
def analyze_input(
    text: str | None = None,
    path: str | None = None,
    format_hint: str | None = None,
    provider: str = "gcp",
    repo_root: str | None = None,
    errors_only: bool = False,
    limit: int | None = None,
    include_raw: bool = False,
    include_stdlib: bool | None = None,
    include_tests: bool = True,
) -> dict[str, Any]:
    """Analyze a crash trace or log.

    Parameters
    ----------
    text/path:
        Inline content, or a file path under TRACEMIND_BASE_DIR. Exactly one.
    format_hint:
        auto (default), raw, json, json-array, csv or tsv.
    provider:
        Field conventions for structured logs: gcp (default) or aws.
    repo_root:
        Repository used to resolve trace frames to source (default: base dir).
    errors_only:
        For logs, keep only error and anomalous entries.
    limit:
        Maximum number of log entries returned (hard-capped).
    include_raw:
        Include the original line in each log entry.
    include_stdlib:
        Keep stdlib frames in the call graph (default: TRACEMIND_INCLUDE_STDLIB).
    include_tests:
        Keep frames from test files in the call graph (default: true).

    Returns
    -------
    dict:
        {"mode": "trace"|"log", "trace": ..., "log": ..., "call_graph": ...}
    """
    return analyze_input_impl(
        text=text,
        path=path,
        format_hint=format_hint,
        provider=provider,
        repo_root=repo_root,
        errors_only=errors_only,
        limit=limit,
        include_raw=include_raw,
        include_stdlib=include_stdlib,
        include_tests=include_tests,
    )


@mcp.tool()
def parse_stack_trace(text: str, language: str | None = None) -> dict[str, Any]:
    """Parse a Python, Go or Node.js stack trace into its error and frames.

    language is detected when omitted.
    """
    return parse_trace_impl(text=text, language=language)


@mcp.tool()
def build_call_graph(
    text: str,
    repo_root: str | None = None,
    include_stdlib: bool | None = None,
    include_tests: bool = True,
) -> dict[str, Any]:
    """Rebuild the crash path of a stack trace from the repository's source files."""
    return call_graph_impl(
        text=text,
        repo_root=repo_root,
        include_stdlib=include_stdlib,
        include_tests=include_tests,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
