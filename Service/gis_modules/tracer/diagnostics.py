"""
Service/gis_modules/tracer/diagnostics.py

구축된 추적 그래프의 연결 상태를 분석하여 로그로 출력하는 진단 모듈입니다.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import networkx as nx

from Common.log import Log
from .graph import TracerGraph


@dataclass(frozen=True)
class TracerDiagnosticsPolicy:
    """진단 판정 임계값입니다."""
    zero_length_threshold: float = 0.0
    top_n_components: int = 5


class TracerGraphDiagnostics:
    """
    활성 간선으로 networkx 그래프를 구성해 분리 그룹, 끝점, 길이 0 간선 등을 보고합니다.
    """

    def __init__(self, logger: Log, policy: Optional[TracerDiagnosticsPolicy] = None):
        self._logger = logger
        self._policy = policy or TracerDiagnosticsPolicy()

    def to_networkx(self, graph: TracerGraph) -> nx.MultiGraph:
        G = nx.MultiGraph()
        G.add_nodes_from(range(graph.vertex_count))
        for e_idx in graph.active_edge_indices():
            edge = graph.edges[e_idx]
            G.add_edge(edge.v1, edge.v2, key=e_idx, weight=edge.weight)
        return G

    def report(self, graph: TracerGraph) -> Dict[str, object]:
        G = self.to_networkx(graph)

        if G.number_of_nodes() == 0:
            self._logger.log("[Tracer:Diag] 그래프가 비어있습니다.", level="WARNING")
            return {"vertices": 0, "edges": 0, "components": 0, "dangles": 0, "zero_length_edges": 0}

        components = sorted((len(c) for c in nx.connected_components(G)), reverse=True)
        dangles = sum(1 for _, d in G.degree() if d == 1)
        zero_length = sum(
            1 for _, _, w in G.edges(data="weight") if w <= self._policy.zero_length_threshold
        )

        summary: Dict[str, object] = {
            "vertices": G.number_of_nodes(),
            "edges": G.number_of_edges(),
            "components": len(components),
            "dangles": dangles,
            "zero_length_edges": zero_length,
        }

        items = ", ".join(f"{k}={v}" for k, v in summary.items())
        self._logger.log(f"[Tracer:Diag] {items}", level="INFO")

        if len(components) > 1:
            self._logger.log(
                f"[Tracer:Diag] 분리 그룹별 정점 수(상위 {self._policy.top_n_components}): "
                f"{components[:self._policy.top_n_components]}",
                level="DEBUG",
            )
        if zero_length:
            self._logger.log(f"[Tracer:Diag] 길이 0 간선 {zero_length}개 존재", level="WARNING")

        return summary
