"""
Service/gis_modules/tracer/locator.py

질의 좌표를 기존 정점 또는 간선 위의 위치로 대응시키는 공간 탐색 모듈입니다.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .graph import Coord, TracerGraph, points_coincide

NOT_FOUND = -1


@dataclass(frozen=True)
class EdgeHit:
    """간선 위 탐색 결과. vertex_after는 점이 놓인 선분의 끝 좌표 순번입니다."""
    edge_index: int
    vertex_after: int
    distance: float


def closest_segment(coords: Sequence[Coord], point: Coord) -> Tuple[float, int, Coord]:
    """
    좌표열에서 point와 가장 가까운 선분을 찾습니다.

    Returns:
        Tuple[float, int, Coord]: (거리, 선분 끝 좌표 순번, 선분 위 최근접점)
    """
    px, py = point[0], point[1]
    best_sq = math.inf
    best_after = 1
    best_pt: Coord = tuple(coords[0][:2])

    for i in range(len(coords) - 1):
        ax, ay = coords[i][0], coords[i][1]
        bx, by = coords[i + 1][0], coords[i + 1][1]
        dx, dy = bx - ax, by - ay
        seg_sq = dx * dx + dy * dy
        if seg_sq == 0.0:
            t = 0.0
        else:
            t = max(0.0, min(1.0, ((px - ax) * dx + (py - ay) * dy) / seg_sq))
        cx, cy = ax + t * dx, ay + t * dy
        d_sq = (px - cx) ** 2 + (py - cy) ** 2
        if d_sq < best_sq:
            best_sq = d_sq
            best_after = i + 1
            best_pt = (cx, cy)

    return math.sqrt(best_sq), best_after, best_pt


class SpatialLocator:
    """
    정점 일치 여부와 간선 위 위치를 분리하여 판정합니다.

    정점에 일치하면 그래프 변경이 필요 없고, 간선 위라면 분할이 필요합니다.
    """

    def __init__(self, epsilon: float = 1e-6):
        self._epsilon = epsilon

    @property
    def epsilon(self) -> float:
        return self._epsilon

    def locate_vertex(self, graph: TracerGraph, point: Coord) -> int:
        for idx in graph.vertex_candidates(point):
            if points_coincide(graph.vertices[idx].point, point, self._epsilon):
                return idx

        # 임시 분할로 추가된 정점은 격자 색인에 없으므로 순차 탐색합니다.
        for idx in range(graph.base_vertex_count, graph.vertex_count):
            if points_coincide(graph.vertices[idx].point, point, self._epsilon):
                return idx

        return NOT_FOUND

    def locate_edge(self, graph: TracerGraph, point: Coord) -> Optional[EdgeHit]:
        for idx in graph.edge_candidates(point, self._epsilon):
            if not graph.is_active(idx):
                continue

            coords = graph.edges[idx].line.coords
            if len(coords) < 2:
                continue

            dist, after, _ = closest_segment(coords, point)
            if dist <= self._epsilon:
                return EdgeHit(edge_index=idx, vertex_after=after, distance=dist)

        return None

    def is_on_graph(self, graph: TracerGraph, point: Coord) -> bool:
        if self.locate_vertex(graph, point) != NOT_FOUND:
            return True
        return self.locate_edge(graph, point) is not None
