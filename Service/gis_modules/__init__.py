"""
Service/gis_modules/__init__.py

레이어 입출력과 경로 추적 핵심 모듈들을 외부로 노출합니다.
"""
from .gis_io import GISIO
from .tracer import (
    GraphSplicer,
    LineworkNoder,
    PathOffsetter,
    ShortestPathSolver,
    SpatialLocator,
    TracerGraphBuilder,
    TracerGraphDiagnostics,
)

__all__ = [
    "GISIO",
    "GraphSplicer",
    "LineworkNoder",
    "PathOffsetter",
    "ShortestPathSolver",
    "SpatialLocator",
    "TracerGraphBuilder",
    "TracerGraphDiagnostics",
]
