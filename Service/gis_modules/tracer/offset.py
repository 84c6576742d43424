"""
Service/gis_modules/tracer/offset.py

추적 결과 경로를 일정 거리만큼 평행 이동한 오프셋 곡선을 생성하는 모듈입니다.
"""
from __future__ import annotations

import math
from typing import List, Optional, Sequence

from shapely.errors import GEOSException
from shapely.geometry import LineString

from Common.log import Log
from Service.schemas import OffsetParameters
from .graph import Coord


def orient_to_endpoints(coords: List[Coord], p1: Coord, p2: Coord) -> List[Coord]:
    """
    오프셋 결과의 시작/끝이 질의점 순서와 반대로 더 가깝다면 좌표열을 뒤집어 반환합니다.
    """
    if len(coords) < 2:
        return coords

    start, end = coords[0], coords[-1]
    diff_normal = _dist(start, p1) + _dist(end, p2)
    diff_reversed = _dist(start, p2) + _dist(end, p1)
    if diff_reversed < diff_normal:
        return list(reversed(coords))
    return coords


def _dist(a: Coord, b: Coord) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


class PathOffsetter:
    """
    shapely offset_curve를 이용해 경로의 오프셋 곡선을 계산합니다.

    결과가 단일 LineString이 아니거나 계산에 실패하면 None을 반환하며, 호출자는 원래 경로를 유지합니다.
    """

    def __init__(self, logger: Log):
        self._logger = logger

    def offset(self, coords: Sequence[Coord], params: OffsetParameters) -> Optional[List[Coord]]:
        if len(coords) < 2 or not params.enabled:
            return None

        try:
            result = LineString(coords).offset_curve(
                params.distance,
                quad_segs=params.quad_segments,
                join_style=params.join_style.value,
                mitre_limit=params.miter_limit,
            )
        except (GEOSException, ValueError) as e:
            self._logger.log(f"[Tracer:Offset] 오프셋 계산 실패, 원본 경로 유지: {e}", level="WARNING")
            return None

        if not isinstance(result, LineString) or result.is_empty or len(result.coords) < 2:
            self._logger.log(
                f"[Tracer:Offset] 오프셋 결과가 단일 선형이 아님({result.geom_type}), 원본 경로 유지",
                level="DEBUG",
            )
            return None

        return list(result.coords)
