"""Tests for the workflow graph definition."""

from toolpick.workflow.graph import create_workflow
from toolpick.workflow.nodes import (
    Aggregate,
    BuildPrompt,
    DispatchTools,
    ParseSelection,
    SelectTools,
)


def test_graph_contains_all_nodes():
    """Every phase is a registered node."""
    workflow = create_workflow()
    node_ids = set(workflow.node_defs)

    for node in (BuildPrompt, SelectTools, ParseSelection, DispatchTools, Aggregate):
        assert node.get_node_id() in node_ids


def test_graph_is_linear():
    """Each phase leads only to the next one."""
    workflow = create_workflow()
    edges = {
        node_id: set(node_def.next_node_edges)
        for node_id, node_def in workflow.node_defs.items()
    }

    assert edges["BuildPrompt"] == {"SelectTools"}
    assert edges["SelectTools"] == {"ParseSelection"}
    assert edges["ParseSelection"] == {"DispatchTools"}
    assert edges["DispatchTools"] == {"Aggregate"}
    assert edges["Aggregate"] == set()
    assert workflow.node_defs["Aggregate"].end_edge is not None
