"""
Function/utils.py

좌표 변환 보조 함수를 제공하는 유틸리티 모듈입니다.
"""
from typing import Any, Tuple


def to_coord(point: Any) -> Tuple[float, ...]:
    """
    shapely Point 또는 좌표 시퀀스를 float 튜플 좌표로 변환합니다.

    Returns:
        Tuple[float, ...]: (x, y) 또는 (x, y, z)
    """
    if hasattr(point, "coords"):
        coords = list(point.coords)
        if len(coords) != 1:
            raise ValueError(f"단일 점 geometry가 필요합니다: {point}")
        point = coords[0]
    values = tuple(float(v) for v in point)
    if len(values) < 2:
        raise ValueError(f"좌표는 최소 2차원이어야 합니다: {point}")
    return values[:3]
