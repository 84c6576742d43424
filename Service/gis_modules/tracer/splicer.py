"""
Service/gis_modules/tracer/splicer.py

질의 좌표를 간선 중간에 임시 정점으로 끼워 넣고(splice), 질의 후 원상 복구하는 모듈입니다.
"""
from __future__ import annotations

from typing import List

from shapely.geometry import LineString

from Common.log import Log
from .graph import Coord, TracerGraph
from .locator import NOT_FOUND, EdgeHit, SpatialLocator


class GraphSplicer:
    """
    간선 분할은 원본 간선을 비활성화하고 새 간선 두 개를 배열 끝에 추가하는 방식으로만 수행합니다.

    복구(revert)는 추가분을 잘라내고 원본 간선을 인접 목록의 같은 위치로 되돌립니다.
    """

    def __init__(self, logger: Log, locator: SpatialLocator):
        self._logger = logger
        self._locator = locator

    @property
    def locator(self) -> SpatialLocator:
        return self._locator

    def ensure_vertex(self, graph: TracerGraph, point: Coord) -> int:
        """
        point에 해당하는 정점 인덱스를 반환합니다. 필요하면 간선을 분할하며, 그래프 밖이면 -1입니다.
        """
        v_idx = self._locator.locate_vertex(graph, point)
        if v_idx != NOT_FOUND:
            return v_idx

        hit = self._locator.locate_edge(graph, point)
        if hit is None:
            return NOT_FOUND

        return self._join_vertex(graph, point, hit)

    def revert(self, graph: TracerGraph) -> None:
        if graph.joined_vertices == 0:
            graph.inactive_edges.clear()
            return

        keep_vertices = graph.base_vertex_count
        keep_edges = graph.base_edge_count

        for vertex in graph.vertices[:keep_vertices]:
            vertex.edges = [self._original_edge(graph, e_idx, keep_edges) for e_idx in vertex.edges]

        restored = len(graph.inactive_edges)
        del graph.vertices[keep_vertices:]
        del graph.edges[keep_edges:]
        graph.inactive_edges.clear()
        graph.joined_vertices = 0

        self._logger.log(f"[Tracer:Splicer] 임시 분할 복구 완료 (간선 {restored}개 재활성화)", level="DEBUG")

    def _join_vertex(self, graph: TracerGraph, point: Coord, hit: EdgeHit) -> int:
        e_idx = hit.edge_index
        edge = graph.edges[e_idx]
        coords = list(edge.line.coords)

        new_pt = self._fit_dimension(point, coords, hit.vertex_after)
        run1 = self._dedupe(coords[:hit.vertex_after] + [new_pt])
        run2 = self._dedupe([new_pt] + coords[hit.vertex_after:])

        v_idx = graph.add_vertex(new_pt)
        e1_idx = graph.add_edge(edge.v1, v_idx, LineString(run1), replaces=e_idx)
        e2_idx = graph.add_edge(v_idx, edge.v2, LineString(run2), replaces=e_idx)
        graph.vertices[v_idx].edges.extend([e1_idx, e2_idx])

        # 인접 목록의 순서를 유지하도록 같은 위치에서 교체합니다.
        v1_edges = graph.vertices[edge.v1].edges
        v1_edges[v1_edges.index(e_idx)] = e1_idx
        v2_edges = graph.vertices[edge.v2].edges
        v2_edges[v2_edges.index(e_idx)] = e2_idx

        graph.inactive_edges.add(e_idx)
        graph.joined_vertices += 1

        self._logger.log(
            f"[Tracer:Splicer] 간선 {e_idx} 분할 -> 정점 {v_idx}, 간선 ({e1_idx}, {e2_idx})",
            level="DEBUG",
        )
        return v_idx

    def _original_edge(self, graph: TracerGraph, e_idx: int, keep_edges: int) -> int:
        while e_idx >= keep_edges:
            replaced = graph.edges[e_idx].replaces
            if replaced is None:
                raise RuntimeError(f"임시 간선 {e_idx}의 원본 간선 정보가 없습니다.")
            e_idx = replaced
        return e_idx

    def _fit_dimension(self, point: Coord, coords: List[Coord], vertex_after: int) -> Coord:
        """간선 좌표의 차원에 맞춰 분할점 좌표를 보정합니다 (2D 점이면 z는 선분 위 보간)."""
        has_z = len(coords[0]) > 2
        if not has_z:
            return (float(point[0]), float(point[1]))
        if len(point) > 2:
            return (float(point[0]), float(point[1]), float(point[2]))

        a = coords[vertex_after - 1]
        b = coords[vertex_after]
        seg_len = ((b[0] - a[0]) ** 2 + (b[1] - a[1]) ** 2) ** 0.5
        if seg_len == 0.0:
            z = a[2]
        else:
            t = (((point[0] - a[0]) ** 2 + (point[1] - a[1]) ** 2) ** 0.5) / seg_len
            z = a[2] + min(1.0, t) * (b[2] - a[2])
        return (float(point[0]), float(point[1]), float(z))

    def _dedupe(self, run: List[Coord]) -> List[Coord]:
        out: List[Coord] = []
        for pt in run:
            if not out or out[-1][:2] != pt[:2]:
                out.append(pt)
        if len(out) < 2:
            out.append(out[0])
        return out
