"""
Service/gis_modules/tracer/builder.py

선형 데이터를 끝점 기준의 정점/간선 그래프로 변환하는 빌더 모듈입니다.
"""
from __future__ import annotations

from typing import Any, Iterable, List

from shapely.geometry import (
    GeometryCollection,
    LineString,
    LinearRing,
    MultiLineString,
    MultiPolygon,
    Polygon,
)

from Common.log import Log
from Function.decorators import log_execution_time, safe_run
from .graph import Coord, TracerGraph, points_coincide


def extract_linework(geom: Any) -> List[LineString]:
    """
    객체 geometry에서 그래프 구축에 사용할 선형 요소를 추출합니다.

    면형은 외곽/내곽 링을 선으로 취급하며 점형은 무시합니다.
    """
    if geom is None or geom.is_empty:
        return []
    if isinstance(geom, LinearRing):
        return [LineString(geom.coords)]
    if isinstance(geom, LineString):
        return [geom]
    if isinstance(geom, Polygon):
        rings = [geom.exterior] + list(geom.interiors)
        return [LineString(r.coords) for r in rings if not r.is_empty]
    if isinstance(geom, (MultiLineString, MultiPolygon, GeometryCollection)):
        lines: List[LineString] = []
        for part in geom.geoms:
            lines.extend(extract_linework(part))
        return lines
    return []


class TracerGraphBuilder:
    """
    선형 목록의 끝점을 정점으로, 선형 자체를 간선으로 하는 그래프를 생성합니다.

    교차점 분할은 수행하지 않으므로, 필요하면 LineworkNoder를 먼저 거쳐야 합니다.
    """

    def __init__(self, logger: Log, epsilon: float = 1e-6):
        self._logger = logger
        self._epsilon = epsilon

    @safe_run
    @log_execution_time
    def build(self, lines: Iterable[LineString]) -> TracerGraph:
        graph = TracerGraph(self._epsilon)
        skipped = 0

        for line in lines:
            if line is None or line.is_empty:
                skipped += 1
                continue

            coords = list(line.coords)
            v1 = self._get_or_add_vertex(graph, coords[0])
            v2 = self._get_or_add_vertex(graph, coords[-1])

            e_idx = graph.add_edge(v1, v2, line)
            graph.vertices[v1].edges.append(e_idx)
            graph.vertices[v2].edges.append(e_idx)

        graph.build_edge_index()

        if skipped:
            self._logger.log(f"[Tracer:Builder] 빈 선형 {skipped}개 제외", level="DEBUG")
        self._logger.log(
            f"[Tracer:Builder] 그래프 구축 완료 - 정점: {graph.vertex_count}, 간선: {graph.edge_count}",
            level="DEBUG",
        )
        return graph

    def _get_or_add_vertex(self, graph: TracerGraph, point: Coord) -> int:
        """허용 오차 안에 기존 정점이 있으면 재사용하고, 없으면 새 정점을 등록합니다."""
        for idx in graph.vertex_candidates(point):
            if points_coincide(graph.vertices[idx].point, point, self._epsilon):
                return idx

        idx = graph.add_vertex(point)
        graph.index_vertex(idx)
        return idx
