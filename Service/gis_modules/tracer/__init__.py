"""
Service/gis_modules/tracer/__init__.py

선형 그래프 구축, 임시 정점 분할, 최단 경로 탐색 등 경로 추적 핵심 모듈들을 외부로 노출합니다.
"""
from .graph import TracerEdge, TracerGraph, TracerVertex, VertexGrid
from .builder import TracerGraphBuilder, extract_linework
from .locator import NOT_FOUND, EdgeHit, SpatialLocator
from .splicer import GraphSplicer
from .solver import ShortestPathSolver, path_length
from .noding import LineworkNoder, NodingResult
from .offset import PathOffsetter, orient_to_endpoints
from .diagnostics import TracerGraphDiagnostics

__all__ = [
    "TracerEdge",
    "TracerGraph",
    "TracerVertex",
    "VertexGrid",
    "TracerGraphBuilder",
    "extract_linework",
    "NOT_FOUND",
    "EdgeHit",
    "SpatialLocator",
    "GraphSplicer",
    "ShortestPathSolver",
    "path_length",
    "LineworkNoder",
    "NodingResult",
    "PathOffsetter",
    "orient_to_endpoints",
    "TracerGraphDiagnostics",
]
