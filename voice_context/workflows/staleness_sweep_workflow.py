"""
voice_context/workflows/staleness_sweep_workflow.py
---------------------------------------------------
LangGraph StateGraph for the nightly summary sweep:

  Input owner ids → validate → check each owner's daily summary → report

The sweep only detects missing summaries. Its output
(state["missing_owner_ids"]) is what the scheduler feeds to the external
generation job. One owner's failure never stops the sweep.

Usage
-----
    from voice_context.workflows.staleness_sweep_workflow import build_staleness_sweep_graph

    app = build_staleness_sweep_graph()
    result = app.invoke({"owner_ids": ["...", "..."]})
    result["missing_owner_ids"]
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, TypedDict
from uuid import UUID

from langgraph.graph import END, StateGraph

from voice_context.dependencies import get_summary_service
from voice_context.services.summary_service import SummaryService

logger = logging.getLogger(__name__)


# ── State ────────────────────────────────────────────────────────────────────

class StalenessSweepState(TypedDict, total=False):
    owner_ids: List[str]
    reports: List[Dict[str, Any]]
    missing_owner_ids: List[str]
    status: str
    error: Optional[str]
    warnings: List[str]


# ── Nodes ────────────────────────────────────────────────────────────────────

def validate_input(state: StalenessSweepState) -> StalenessSweepState:
    """Drop malformed owner ids; fail if none are left."""
    warnings: List[str] = []
    valid: List[str] = []

    for raw in state.get("owner_ids") or []:
        try:
            valid.append(str(UUID(str(raw))))
        except ValueError:
            warnings.append(f"Skipping invalid owner id: {raw}")

    if not valid:
        return {**state, "status": "failed", "error": "At least one valid owner id required", "warnings": warnings}

    return {**state, "owner_ids": valid, "warnings": warnings, "status": "validated"}


def check_owners(state: StalenessSweepState, service: SummaryService) -> StalenessSweepState:
    """Run the staleness check per owner, collecting owners with a missing summary."""
    warnings = list(state.get("warnings", []))
    reports: List[Dict[str, Any]] = []
    missing: List[str] = []

    for owner_id in state.get("owner_ids", []):
        report = service.check_staleness(UUID(owner_id))
        reports.append({
            "owner_id": owner_id,
            "period_start": report.period_start.isoformat(),
            "missing": report.missing,
            "error": report.error,
        })
        if report.error:
            warnings.append(f"Staleness check failed for {owner_id}: {report.error}")
        elif report.missing:
            missing.append(owner_id)

    logger.info("Staleness sweep: %d owners checked, %d missing", len(reports), len(missing))
    return {
        **state,
        "reports": reports,
        "missing_owner_ids": missing,
        "warnings": warnings,
        "status": "complete",
    }


def handle_error(state: StalenessSweepState) -> StalenessSweepState:
    """Terminal error handler."""
    logger.error("Staleness sweep failed: %s", state.get("error"))
    return {**state, "status": "failed", "reports": [], "missing_owner_ids": []}


# ── Routing ──────────────────────────────────────────────────────────────────

def route_after_validate(state: StalenessSweepState) -> str:
    if state.get("status") == "failed":
        return "handle_error"
    return "check_owners"


# ── Graph ────────────────────────────────────────────────────────────────────

def build_staleness_sweep_graph(service: Optional[SummaryService] = None):
    """Build and compile the sweep graph. ``service`` defaults to the Supabase store."""
    svc = service or get_summary_service()

    def _check_owners(state: StalenessSweepState) -> StalenessSweepState:
        return check_owners(state, svc)

    graph = StateGraph(StalenessSweepState)

    graph.add_node("validate_input", validate_input)
    graph.add_node("check_owners", _check_owners)
    graph.add_node("handle_error", handle_error)

    graph.set_entry_point("validate_input")

    graph.add_conditional_edges("validate_input", route_after_validate)
    graph.add_edge("check_owners", END)
    graph.add_edge("handle_error", END)

    return graph.compile()
