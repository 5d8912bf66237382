from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from forcegraph.contracts import GraphPayload
from forcegraph.graph.model import GraphLoadError, load_graph


def _payload() -> dict:
    return {
        "nodes": [
            {"id": "A", "value": 50, "categories": 1, "label": "Alpha"},
            {"id": "B", "value": 10, "title": "Beta", "label": "b"},
            {"id": 3, "value": 200, "image": "icons/three.svg"},
        ],
        "links": [
            {"source": "A", "target": "B", "value": 9},
            {"source": "B", "target": 3},
        ],
    }


def test_nodes_sorted_by_value_with_indices() -> None:
    graph = load_graph(_payload())

    assert [node.id for node in graph.nodes] == ["B", "A", 3]
    assert [node.index for node in graph.nodes] == [0, 1, 2]


def test_links_resolve_to_node_objects() -> None:
    graph = load_graph(_payload())

    first = graph.links[0]
    assert first.source is graph.node("A")
    assert first.target is graph.node("B")
    assert first.width == pytest.approx(3.0)
    assert graph.links[1].value == 1.0
    assert [link.index for link in graph.links] == [0, 1]


def test_node_display_attributes() -> None:
    graph = load_graph(_payload())

    assert graph.node("A").display_text == "Alpha"
    assert graph.node("B").display_text == "Beta"
    assert graph.node(3).display_text == ""
    assert graph.node("B").radius() == 14.0
    assert graph.node("A").radius() == 25.0
    assert graph.node(3).radius() == 60.0
    assert math.isnan(graph.node("A").x)


@pytest.mark.parametrize("link", [{"source": "X", "target": "A"}, {"source": "A", "target": "X"}])
def test_link_to_missing_node_raises(link: dict) -> None:
    data = {
        "nodes": [{"id": "A", "value": 1}, {"id": "B", "value": 1}],
        "links": [link],
    }

    with pytest.raises(GraphLoadError, match="'X'"):
        load_graph(data)


def test_duplicate_node_id_raises() -> None:
    data = {"nodes": [{"id": "A", "value": 1}, {"id": "A", "value": 2}], "links": []}

    with pytest.raises(GraphLoadError):
        load_graph(data)


def test_invalid_payload_chains_validation_error() -> None:
    data = {"nodes": [{"id": "A"}], "links": []}

    with pytest.raises(GraphLoadError) as excinfo:
        load_graph(data)
    assert isinstance(excinfo.value.__cause__, ValidationError)


@pytest.mark.parametrize("data", [None, ["nodes"], "graph"])
def test_non_mapping_data_rejected(data: object) -> None:
    with pytest.raises(GraphLoadError):
        load_graph(data)  # type: ignore[arg-type]


def test_blank_node_id_rejected() -> None:
    with pytest.raises(ValidationError):
        GraphPayload(nodes=[{"id": "  ", "value": 1}])


def test_integer_and_string_ids_stay_distinct() -> None:
    graph = load_graph({"nodes": [{"id": 1, "value": 1}, {"id": "1", "value": 2}], "links": []})

    assert 1 in graph
    assert "1" in graph
    assert graph.node(1) is not graph.node("1")


def test_unknown_lookup_raises_key_error() -> None:
    graph = load_graph(_payload())

    with pytest.raises(KeyError):
        graph.node("missing")


def test_validated_payload_is_accepted() -> None:
    payload = GraphPayload(**_payload())

    graph = load_graph(payload)
    assert graph.payload is payload
    assert len(graph.links) == 2
