"""
Service/gis_modules/tracer/noding.py

선형들이 서로 교차하는 지점에서 분할되도록 평면화(noding)하는 전처리 모듈입니다.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from shapely.errors import GEOSException
from shapely.geometry import LineString
from shapely.ops import unary_union

from Common.log import Log
from .builder import extract_linework


@dataclass(frozen=True)
class NodingResult:
    """평면화 결과. 실패 시 원본 선형과 topology_problem=True를 담습니다."""
    lines: List[LineString]
    topology_problem: bool = False


class LineworkNoder:
    """
    교차점이 그래프 정점이 되도록 선형을 분할합니다. 실패해도 예외를 전파하지 않습니다.
    """

    def __init__(self, logger: Log):
        self._logger = logger

    def node(self, lines: List[LineString]) -> NodingResult:
        valid = [ln for ln in lines if ln is not None and not ln.is_empty]
        if not valid:
            return NodingResult(lines=[])

        try:
            merged_geom = unary_union(valid)
        except (GEOSException, ValueError) as e:
            # 교차점 일부를 놓칠 수 있지만 원본 선형으로 계속 진행합니다.
            self._logger.log(f"[Tracer:Noding] 평면화 실패, 원본 선형 사용: {e}", level="WARNING")
            return NodingResult(lines=list(valid), topology_problem=True)

        noded = [ln for ln in extract_linework(merged_geom) if not ln.is_empty]
        self._logger.log(
            f"[Tracer:Noding] 평면화 완료: {len(valid)}개 -> {len(noded)}개 세그먼트",
            level="DEBUG",
        )
        return NodingResult(lines=noded)
