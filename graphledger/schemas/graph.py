"""Graph Schemas: adjacency-map payloads shared by model and simulation endpoints.

Invariants:
    - Node names are non-empty strings; weights are positive finite numbers
    - Structural checks (empty graph, weight sign) reuse core/graph_cost.validate_graph
"""

from pydantic import BaseModel, Field, field_validator

from graphledger.core.graph_cost import validate_graph


class GraphPayload(BaseModel):
    """Adjacency map node -> {neighbor: weight}."""
    graph: dict[str, dict[str, float]]

    @field_validator("graph")
    @classmethod
    def check_graph(cls, v: dict[str, dict[str, float]]) -> dict[str, dict[str, float]]:
        error = validate_graph(v)
        if error:
            raise ValueError(error)
        return v


class EdgeRef(BaseModel):
    from_node: str = Field(min_length=1, max_length=255)
    to_node: str = Field(min_length=1, max_length=255)
