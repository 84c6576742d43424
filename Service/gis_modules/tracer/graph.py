"""
Service/gis_modules/tracer/graph.py

경로 추적용 그래프의 정점/간선 저장 구조(인덱스 기반 arena)와 공간 색인을 정의합니다.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

import shapely
from shapely.geometry import LineString
from shapely.strtree import STRtree

Coord = Tuple[float, ...]


@dataclass
class TracerVertex:
    """선형 끝점이 모이는 그래프 정점입니다. z값은 위상 판정에 사용하지 않습니다."""
    point: Coord
    edges: List[int] = field(default_factory=list)

    @property
    def x(self) -> float:
        return self.point[0]

    @property
    def y(self) -> float:
        return self.point[1]


@dataclass
class TracerEdge:
    """두 정점을 잇는 양방향 간선이며, 끝점을 포함한 전체 좌표열을 보관합니다."""
    v1: int
    v2: int
    line: LineString
    replaces: Optional[int] = None

    @property
    def weight(self) -> float:
        return float(self.line.length)

    def other_vertex(self, v0: int) -> int:
        return self.v2 if self.v1 == v0 else self.v1

    def coords_from(self, v0: int) -> List[Coord]:
        """정점 v0에서 출발하는 방향으로 정렬된 좌표열을 반환합니다."""
        coords = list(self.line.coords)
        if self.v1 != v0:
            coords.reverse()
        return coords


class VertexGrid:
    """
    epsilon 크기의 격자로 정점을 해싱하여 근접 정점 탐색을 가속합니다.

    허용 오차 이내의 두 점은 항상 인접한 격자(3x3) 안에 존재합니다.
    """

    def __init__(self, epsilon: float):
        self._epsilon = epsilon
        self._cells: Dict[Tuple[int, int], List[int]] = {}

    def _cell(self, x: float, y: float) -> Tuple[int, int]:
        return math.floor(x / self._epsilon), math.floor(y / self._epsilon)

    def insert(self, index: int, point: Coord) -> None:
        self._cells.setdefault(self._cell(point[0], point[1]), []).append(index)

    def candidates(self, point: Coord) -> List[int]:
        cx, cy = self._cell(point[0], point[1])
        found: List[int] = []
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                found.extend(self._cells.get((cx + dx, cy + dy), ()))
        return sorted(found)

    def __len__(self) -> int:
        return sum(len(v) for v in self._cells.values())


def points_coincide(a: Coord, b: Coord, epsilon: float) -> bool:
    """두 점의 x, y가 각각 epsilon 미만으로 차이나면 같은 위치로 판정합니다."""
    if a[0] == b[0] and a[1] == b[1]:
        return True
    return abs(a[0] - b[0]) < epsilon and abs(a[1] - b[1]) < epsilon


class TracerGraph:
    """
    정점/간선을 안정적인 정수 인덱스로 관리하는 그래프입니다.

    임시 분할(splice)로 추가된 정점/간선은 항상 배열 끝에 붙으며,
    `joined_vertices` 값만큼 잘라내어 원상 복구합니다.
    """

    def __init__(self, epsilon: float):
        self.epsilon = epsilon
        self.vertices: List[TracerVertex] = []
        self.edges: List[TracerEdge] = []
        self.inactive_edges: Set[int] = set()
        self.joined_vertices = 0

        self._vertex_grid = VertexGrid(epsilon)
        self._edge_tree: Optional[STRtree] = None
        self._indexed_edge_count = 0

    # ----- 저장 구조 -----

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    @property
    def base_vertex_count(self) -> int:
        return len(self.vertices) - self.joined_vertices

    @property
    def base_edge_count(self) -> int:
        return len(self.edges) - 2 * self.joined_vertices

    def add_vertex(self, point: Coord) -> int:
        self.vertices.append(TracerVertex(point=tuple(point)))
        return len(self.vertices) - 1

    def add_edge(self, v1: int, v2: int, line: LineString, replaces: Optional[int] = None) -> int:
        self.edges.append(TracerEdge(v1=v1, v2=v2, line=line, replaces=replaces))
        return len(self.edges) - 1

    def is_active(self, edge_index: int) -> bool:
        return edge_index not in self.inactive_edges

    def active_edge_indices(self) -> List[int]:
        return [i for i in range(len(self.edges)) if i not in self.inactive_edges]

    def adjacency_snapshot(self) -> List[Tuple[int, ...]]:
        """정점별 인접 간선 목록의 사본을 반환합니다 (복구 검증용)."""
        return [tuple(v.edges) for v in self.vertices]

    # ----- 공간 색인 -----

    def index_vertex(self, index: int) -> None:
        self._vertex_grid.insert(index, self.vertices[index].point)

    def build_edge_index(self) -> None:
        """구축 완료 시점의 간선 전체에 대해 STRtree를 생성합니다."""
        self._indexed_edge_count = len(self.edges)
        if self.edges:
            self._edge_tree = STRtree([e.line for e in self.edges])
        else:
            self._edge_tree = None

    def vertex_candidates(self, point: Coord) -> List[int]:
        return self._vertex_grid.candidates(point)

    def edge_candidates(self, point: Coord, radius: float) -> List[int]:
        """
        point 주변 radius 상자와 외곽 사각형이 겹치는 간선 인덱스를 오름차순으로 반환합니다.

        색인 이후 추가된 간선(임시 분할 간선)은 항상 후보에 포함됩니다.
        """
        found: Sequence[int] = []
        if self._edge_tree is not None:
            query_box = shapely.box(point[0] - radius, point[1] - radius, point[0] + radius, point[1] + radius)
            found = [int(i) for i in self._edge_tree.query(query_box)]
        extra = range(self._indexed_edge_count, len(self.edges))
        return sorted(set(found).union(extra))
