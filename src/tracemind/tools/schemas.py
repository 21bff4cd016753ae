"""Pydantic output schemas for the MCP tools."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class FrameOut(BaseModel):
    function: str | None = Field(description="Function name as printed in the trace.")
    file: str | None = Field(description="File path as printed in the trace.")
    line: int = Field(ge=0)
    column: int = Field(default=0, ge=0)
    module: str | None = None
    context: str | None = Field(default=None, description="Source line shown under the frame.")
    is_stdlib: bool = False
    is_third_party: bool = False


class LangScoreOut(BaseModel):
    language: str
    score: int = Field(ge=0, le=100)


class TraceOut(BaseModel):
    language: str
    language_name: str
    error_type: str | None = None
    error_message: str | None = None
    frame_count: int = Field(ge=0)
    frames: list[FrameOut] = Field(default_factory=list)
    language_scores: list[LangScoreOut] = Field(default_factory=list)


class LogEntryOut(BaseModel):
    line_number: int = Field(ge=1)
    timestamp: str | None = None
    severity: str | None = None
    source: str | None = None
    message: str
    relevance_score: float = Field(ge=0.0, le=1.0)
    is_error: bool = False
    is_anomaly: bool = False
    raw_line: str | None = None
    metadata: dict[str, Any] | None = None


class LogOut(BaseModel):
    format: str
    format_description: str
    entry_count: int = Field(ge=0, description="Entries in the returned view before the limit.")
    total_errors: int = 0
    total_warnings: int = 0
    total_info: int = 0
    time_range_start: str | None = None
    time_range_end: str | None = None
    error_signatures: list[str] = Field(default_factory=list)
    entries: list[LogEntryOut] = Field(default_factory=list)


class CallNodeOut(BaseModel):
    name: str
    qualified_name: str | None = None
    file: str
    start_line: int
    end_line: int
    signature: str | None = None
    complexity: int = Field(ge=1)
    frame_line: int = 0
    callers: list[int] = Field(default_factory=list, description="Indexes into nodes.")
    callees: list[int] = Field(default_factory=list, description="Indexes into nodes.")


class CallGraphOut(BaseModel):
    node_count: int = Field(ge=0)
    edge_count: int = Field(ge=0)
    entry_point: int | None = Field(default=None, description="Index into nodes.")
    nodes: list[CallNodeOut] = Field(default_factory=list)


class AnalysisReport(BaseModel):
    mode: str
    trace: TraceOut | None = None
    log: LogOut | None = None
    call_graph: CallGraphOut | None = None
    repo_root: str | None = None
    analysis_time_ms: float = Field(ge=0.0)
