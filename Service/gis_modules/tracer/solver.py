"""
Service/gis_modules/tracer/solver.py

두 정점 사이의 최단 경로를 Dijkstra 알고리즘으로 탐색하고 경로 좌표열을 복원하는 모듈입니다.
"""
from __future__ import annotations

import heapq
import math
from typing import List, Sequence

from Common.log import Log
from .graph import Coord, TracerGraph
from .locator import NOT_FOUND


def path_length(coords: Sequence[Coord]) -> float:
    """좌표열의 평면(x, y) 길이를 반환합니다."""
    total = 0.0
    for a, b in zip(coords, coords[1:]):
        total += math.hypot(b[0] - a[0], b[1] - a[1])
    return total


class ShortestPathSolver:
    """
    단일 출발/단일 도착 Dijkstra 탐색기입니다.

    간선 가중치는 간선 선형의 길이이며 음수가 없으므로 도착 정점을 꺼내는 즉시 종료합니다.
    거리가 같은 후보는 큐에 먼저 들어간 항목이 먼저 처리됩니다.
    """

    def __init__(self, logger: Log):
        self._logger = logger

    def shortest_path(self, graph: TracerGraph, v1: int, v2: int) -> List[Coord]:
        if v1 == NOT_FOUND or v2 == NOT_FOUND:
            return []

        if v1 == v2:
            return [graph.vertices[v1].point]

        n = graph.vertex_count
        dist = [math.inf] * n
        finalized = [False] * n
        predecessor = [-1] * n
        dist[v1] = 0.0

        seq = 0
        queue = [(0.0, seq, v1)]
        reached = False

        while queue:
            d_u, _, u = heapq.heappop(queue)

            if u == v2:
                reached = True
                break

            if finalized[u]:
                continue

            for e_idx in graph.vertices[u].edges:
                if not graph.is_active(e_idx):
                    continue
                edge = graph.edges[e_idx]
                v = edge.other_vertex(u)
                candidate = d_u + edge.weight
                if not finalized[v] and candidate < dist[v]:
                    dist[v] = candidate
                    predecessor[v] = e_idx
                    seq += 1
                    heapq.heappush(queue, (candidate, seq, v))

            finalized[u] = True

        if not reached:
            self._logger.log(f"[Tracer:Solver] 정점 {v1} -> {v2} 연결 경로 없음", level="DEBUG")
            return []

        path = self._reconstruct(graph, predecessor, v2)
        self._logger.log(
            f"[Tracer:Solver] 경로 탐색 완료 - 거리: {dist[v2]:.6f}, 좌표 수: {len(path)}",
            level="DEBUG",
        )
        return path

    def _reconstruct(self, graph: TracerGraph, predecessor: List[int], target: int) -> List[Coord]:
        """도착 정점에서 선행 간선을 따라 역추적한 뒤, 출발 -> 도착 순으로 뒤집어 반환합니다."""
        points: List[Coord] = []
        u = target
        while predecessor[u] != -1:
            edge = graph.edges[predecessor[u]]
            run = edge.coords_from(u)
            if points:
                # 이전 간선의 마지막 좌표(u)는 이번 간선의 시작 좌표와 같습니다.
                points.pop()
            points.extend(run)
            u = edge.other_vertex(u)

        points.reverse()

        # 2D/3D 간선이 섞인 경로는 평면 좌표로 통일합니다.
        if len({len(p) for p in points}) > 1:
            points = [(float(p[0]), float(p[1])) for p in points]
        return points
