"""Pydantic models for structured timing reports."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class TimingNodeReport(BaseModel):
    """Statistics of one node, with its children nested in creation order."""

    id: int = Field(..., description="Registry id of the node's label.")
    label: str
    calls: int = Field(..., ge=0, description="Number of closed tic/toc pairs.")
    cpu_s: float = Field(..., ge=0.0, description="Cumulative CPU seconds.")
    wall_s: float = Field(..., ge=0.0, description="Cumulative wall-clock seconds.")
    children_s: float = Field(..., ge=0.0, description="Sum of the children's totals, or cpu_s for a leaf.")
    mean_s: float = Field(..., ge=0.0)
    std_s: float = Field(..., ge=0.0)
    min_s: float | None = Field(default=None, description="Smallest per-iteration total, once an iteration finished.")
    max_s: float | None = Field(default=None, description="Largest per-iteration total, once an iteration finished.")
    percent_of_parent: float | None = Field(default=None, description="Share of the parent's total, in percent.")
    children: list[TimingNodeReport] = Field(default_factory=list)


class TimingReport(BaseModel):
    """Whole-tree snapshot suitable for JSON output."""

    generated_at: datetime
    node_count: int
    root: TimingNodeReport


TimingNodeReport.model_rebuild()
