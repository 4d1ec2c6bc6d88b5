"""Workflow nodes for the query graph."""

from toolpick.workflow.nodes.aggregate import Aggregate
from toolpick.workflow.nodes.build_prompt import BuildPrompt
from toolpick.workflow.nodes.dispatch_tools import DispatchTools
from toolpick.workflow.nodes.parse_selection import ParseSelection
from toolpick.workflow.nodes.select_tools import SelectTools

__all__ = [
    "BuildPrompt",
    "SelectTools",
    "ParseSelection",
    "DispatchTools",
    "Aggregate",
]
