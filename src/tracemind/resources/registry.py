"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from mcp.server.fastmcp import FastMCP

from tracemind.core.structured import FIELD_MAPS
from tracemind.tools.schemas import AnalysisReport


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://tracemind/help")
    def help_resource() -> str:
        """Return a short list of available tools and resource URIs."""
        return (
            "Tools:\n"
            "- analyze_input: stack trace or log text/file -> trace + call graph, or scored log\n"
            "- parse_stack_trace: Python/Go/Node.js trace -> error and frames\n"
            "- build_call_graph: trace + repository -> crash-path call graph\n"
            "\nResources:\n"
            "- app://tracemind/help\n"
            "- app://tracemind/fields/{provider} (gcp, aws)\n"
            "- app://tracemind/schemas/analysis-report\n"
            "- app://tracemind/examples/sample-trace\n"
        )

    @mcp.resource("app://tracemind/fields/{provider}")
    def log_fields(provider: str) -> dict[str, str | None]:
        """Return the field-name table used for a cloud log provider."""
        try:
            fields = FIELD_MAPS[provider.lower()]
        except KeyError as e:
            raise ValueError(f"Unknown provider '{provider}'. Valid values: gcp, aws.") from e
        return asdict(fields)

    @mcp.resource("app://tracemind/schemas/analysis-report")
    def report_schema() -> dict[str, Any]:
        """Return the JSON schema of analyze_input results."""
        return AnalysisReport.model_json_schema()

    @mcp.resource("app://tracemind/examples/sample-trace")
    def sample_trace() -> str:
        """Return a tiny Python traceback for demos and tests."""
        return (
            "Traceback (most recent call last):\n"
            '  File "/app/main.py", line 42, in process_request\n'
            "    result = handler.execute(query)\n"
            '  File "/app/handlers.py", line 156, in execute\n'
            "    return self._run_query(query)\n"
            "ValueError: invalid query\n"
        )
