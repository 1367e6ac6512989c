"""운송 박스 전이 테이블의 그래프 표현.

TRANSITIONS를 networkx 방향 그래프로 만들어
도달 가능성, 최단 전이 경로, 종결 상태 조회에 쓴다.
"""

from __future__ import annotations

import logging

import networkx as nx

from heblo_warehouse.domain.entities.transport_box_transitions import (
    TRANSITIONS,
)
from heblo_warehouse.domain.enums import TransportBoxState

logger = logging.getLogger(__name__)


def build_transition_graph(include_system: bool = True) -> nx.DiGraph:
    """전이 테이블로부터 방향 그래프를 생성한다.

    Args:
        include_system: 시스템 전용 전이 포함 여부.

    Returns:
        노드가 TransportBoxState, 간선 속성이
        method/transition_type/system_only인 DiGraph.
    """
    graph = nx.DiGraph()
    for state, node in TRANSITIONS.items():
        graph.add_node(state)
        for transition in node.transitions:
            if transition.system_only and not include_system:
                continue
            graph.add_edge(
                state,
                transition.new_state,
                method=transition.method_name,
                transition_type=transition.transition_type,
                system_only=transition.system_only,
            )

    logger.debug(
        'Transition graph: %d states, %d transitions',
        graph.number_of_nodes(), graph.number_of_edges(),
    )
    return graph


def reachable_states(
    graph: nx.DiGraph, start: TransportBoxState
) -> set[TransportBoxState]:
    """start에서 도달 가능한 상태 집합 (start 제외)."""
    return set(nx.descendants(graph, start))


def shortest_transition_path(
    graph: nx.DiGraph,
    start: TransportBoxState,
    goal: TransportBoxState,
) -> list[str] | None:
    """start에서 goal까지 최소 전이 수의 메서드 이름 목록.

    Returns:
        메서드 이름 리스트. 도달할 수 없으면 None.
    """
    try:
        path = nx.shortest_path(graph, start, goal)
    except nx.NetworkXNoPath:
        return None
    return [
        graph.edges[u, v]['method'] for u, v in zip(path, path[1:])
    ]


def terminal_states(graph: nx.DiGraph) -> set[TransportBoxState]:
    """나가는 전이가 없는 상태 집합."""
    return {
        state for state in graph.nodes if graph.out_degree(state) == 0
    }
