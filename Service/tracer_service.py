"""
Service/tracer_service.py

레이어 선형으로부터 그래프를 지연 구축하고, 두 점 사이의 최단 경로(스냅 추적)를 제공하는 서비스 모듈입니다.
"""
from __future__ import annotations

import time
from enum import IntEnum
from typing import Any, List, NamedTuple, Optional, Sequence, Tuple

from shapely.geometry import LineString

from Common.log import Log
from Function.decorators import log_execution_time, safe_run
from Function.utils import to_coord
from Service.config import TracerConfig
from Service.layer_source import FeatureRequest, LineLayer, RenderContext
from Service.schemas import JoinStyle, OffsetParameters
from Service.gis_modules.tracer import (
    NOT_FOUND,
    GraphSplicer,
    LineworkNoder,
    PathOffsetter,
    ShortestPathSolver,
    SpatialLocator,
    TracerGraph,
    TracerGraphBuilder,
    TracerGraphDiagnostics,
    extract_linework,
    orient_to_endpoints,
    path_length,
)

Coord = Tuple[float, ...]


class PathError(IntEnum):
    """최단 경로 질의 결과 코드입니다."""
    NONE = 0
    TOO_MANY_FEATURES = 1
    POINT1 = 2
    POINT2 = 3
    NO_PATH = 4


class TraceResult(NamedTuple):
    """질의 결과 경로 좌표열과 오류 코드. 실패 시 path는 빈 튜플입니다."""
    path: Tuple[Coord, ...]
    error: PathError

    @property
    def is_empty(self) -> bool:
        return len(self.path) == 0

    @property
    def length(self) -> float:
        return path_length(self.path)

    def as_linestring(self) -> LineString:
        if len(self.path) < 2:
            return LineString()
        return LineString(self.path)


class Tracer:
    """
    그래프 캐시의 상태(비어 있음 / 구축됨)를 관리하며 최단 경로 질의를 처리합니다.

    레이어 구성, 범위, 좌표계, 렌더링 문맥이 바뀌거나 레이어 데이터가 변경되면 그래프를 폐기하고,
    다음 질의 시점에 다시 구축합니다. 오프셋 파라미터 변경은 그래프에 영향을 주지 않습니다.
    """

    def __init__(
        self,
        logger: Log,
        config: Optional[TracerConfig] = None,
        builder: Optional[TracerGraphBuilder] = None,
        splicer: Optional[GraphSplicer] = None,
        solver: Optional[ShortestPathSolver] = None,
        noder: Optional[LineworkNoder] = None,
        offsetter: Optional[PathOffsetter] = None,
        diagnostics: Optional[TracerGraphDiagnostics] = None,
    ):
        self._logger = logger
        self._config = config or TracerConfig()

        eps = self._config.epsilon
        self._builder = builder or TracerGraphBuilder(logger, eps)
        self._splicer = splicer or GraphSplicer(logger, SpatialLocator(eps))
        self._solver = solver or ShortestPathSolver(logger)
        self._noder = noder or LineworkNoder(logger)
        self._offsetter = offsetter or PathOffsetter(logger)
        self._diagnostics = diagnostics or TracerGraphDiagnostics(logger)

        self._graph: Optional[TracerGraph] = None
        self._has_topology_problem = False

        self._layers: List[LineLayer] = []
        self._crs: Any = None
        self._extent: Optional[Tuple[float, float, float, float]] = None
        self._render_context: Optional[RenderContext] = None
        self._max_feature_count = self._config.max_feature_count
        self._offset_params = OffsetParameters(
            distance=self._config.offset_distance,
            quad_segments=self._config.offset_quad_segments,
            join_style=self._config.offset_join_style,
            miter_limit=self._config.offset_miter_limit,
        )

    # ----- 구성 -----

    def layers(self) -> List[LineLayer]:
        return list(self._layers)

    def set_layers(self, layers: Sequence[LineLayer]) -> None:
        layers = list(layers)
        if layers == self._layers:
            return

        for layer in self._layers:
            self._disconnect_layer(layer)

        self._layers = layers

        for layer in self._layers:
            self._connect_layer(layer)

        self.invalidate_graph()

    def destination_crs(self) -> Any:
        return self._crs

    def set_destination_crs(self, crs: Any) -> None:
        self._crs = crs
        self.invalidate_graph()

    def render_context(self) -> Optional[RenderContext]:
        return self._render_context

    def set_render_context(self, context: Optional[RenderContext]) -> None:
        self._render_context = context
        self.invalidate_graph()

    def extent(self) -> Optional[Tuple[float, float, float, float]]:
        return self._extent

    def set_extent(self, extent: Optional[Tuple[float, float, float, float]]) -> None:
        extent = tuple(float(v) for v in extent) if extent is not None else None
        if extent == self._extent:
            return

        self._extent = extent
        self.invalidate_graph()

    def max_feature_count(self) -> int:
        return self._max_feature_count

    def set_max_feature_count(self, count: int) -> None:
        if count < 0:
            raise ValueError(f"최대 객체 수는 0 이상이어야 합니다: {count}")
        self._max_feature_count = count
        self.invalidate_graph()

    def offset(self) -> float:
        return self._offset_params.distance

    def set_offset(self, distance: float) -> None:
        self._offset_params = self._offset_params.model_copy(update={"distance": float(distance)})

    def offset_parameters(self) -> Tuple[int, JoinStyle, float]:
        p = self._offset_params
        return p.quad_segments, p.join_style, p.miter_limit

    def set_offset_parameters(self, quad_segments: int, join_style: Any, miter_limit: float) -> None:
        # 유효성 검증을 위해 model_copy 대신 새 모델을 생성합니다.
        self._offset_params = OffsetParameters(
            distance=self._offset_params.distance,
            quad_segments=quad_segments,
            join_style=join_style,
            miter_limit=miter_limit,
        )

    def has_topology_problem(self) -> bool:
        return self._has_topology_problem

    def has_graph(self) -> bool:
        return self._graph is not None

    def graph(self) -> Optional[TracerGraph]:
        return self._graph

    # ----- 그래프 수명 주기 -----

    def configure(self) -> None:
        """그래프 구축 직전에 호출됩니다. 하위 클래스에서 레이어/범위 등을 지연 설정할 때 재정의합니다."""

    def init(self) -> bool:
        if self._graph is not None:
            return True

        self.configure()
        return self._init_graph()

    def invalidate_graph(self) -> None:
        if self._graph is not None:
            self._logger.log("[Tracer] 그래프 캐시 무효화", level="DEBUG")
        self._graph = None

    @safe_run
    @log_execution_time
    def _init_graph(self) -> bool:
        self._has_topology_problem = False

        t_extract = time.perf_counter()
        lines = []
        features_counted = 0

        for layer in self._layers:
            request = FeatureRequest(
                destination_crs=self._crs,
                extent=self._extent,
                visibility=self._visibility_filter(layer),
            )

            for feature in layer.get_features(request):
                if feature.geometry is None or feature.geometry.is_empty:
                    continue

                lines.extend(extract_linework(feature.geometry))

                features_counted += 1
                if self._max_feature_count and features_counted > self._max_feature_count:
                    self._logger.log(
                        f"[Tracer] 객체 수가 제한({self._max_feature_count})을 초과하여 그래프 구축을 중단합니다.",
                        level="WARNING",
                    )
                    return False

        extract_ms = (time.perf_counter() - t_extract) * 1000.0

        t_noding = time.perf_counter()
        if self._config.enable_noding:
            noding = self._noder.node(lines)
            lines = noding.lines
            self._has_topology_problem = noding.topology_problem
        noding_ms = (time.perf_counter() - t_noding) * 1000.0

        t_make = time.perf_counter()
        self._graph = self._builder.build(lines)
        make_ms = (time.perf_counter() - t_make) * 1000.0

        self._logger.log(
            f"[Tracer] extract {extract_ms:.1f}ms, noding {noding_ms:.1f}ms, make {make_ms:.1f}ms "
            f"(객체 {features_counted}개, 선형 {len(lines)}개)",
            level="DEBUG",
        )

        if self._config.debug_graph_diagnostics:
            self._diagnostics.report(self._graph)

        return True

    def _visibility_filter(self, layer: LineLayer):
        """렌더링되지 않는 객체를 제외하는 판정 함수를 생성합니다. 필터가 필요 없으면 None입니다."""
        if self._config.snap_invisible_features:
            return None
        renderer = layer.renderer
        context = self._render_context
        if renderer is None or context is None:
            return None
        return lambda feature: bool(renderer(feature, context))

    # ----- 변경 통지 -----

    def _connect_layer(self, layer: LineLayer) -> None:
        layer.featureAdded.connect(self._on_feature_added)
        layer.featureDeleted.connect(self._on_feature_deleted)
        layer.geometryChanged.connect(self._on_geometry_changed)
        layer.attributeValueChanged.connect(self._on_attribute_value_changed)
        layer.dataChanged.connect(self._on_data_changed)
        layer.styleChanged.connect(self._on_style_changed)
        layer.willBeDeleted.connect(self._on_layer_deleted)

    def _disconnect_layer(self, layer: LineLayer) -> None:
        layer.featureAdded.disconnect(self._on_feature_added)
        layer.featureDeleted.disconnect(self._on_feature_deleted)
        layer.geometryChanged.disconnect(self._on_geometry_changed)
        layer.attributeValueChanged.disconnect(self._on_attribute_value_changed)
        layer.dataChanged.disconnect(self._on_data_changed)
        layer.styleChanged.disconnect(self._on_style_changed)
        layer.willBeDeleted.disconnect(self._on_layer_deleted)

    def _on_feature_added(self, _fid) -> None:
        self.invalidate_graph()

    def _on_feature_deleted(self, _fid) -> None:
        self.invalidate_graph()

    def _on_geometry_changed(self, _fid, _geometry) -> None:
        self.invalidate_graph()

    def _on_attribute_value_changed(self, _fid, _column, _value) -> None:
        self.invalidate_graph()

    def _on_data_changed(self) -> None:
        self.invalidate_graph()

    def _on_style_changed(self) -> None:
        self.invalidate_graph()

    def _on_layer_deleted(self, layer: LineLayer) -> None:
        if layer in self._layers:
            self._disconnect_layer(layer)
            self._layers.remove(layer)
        self.invalidate_graph()

    # ----- 질의 -----

    def find_shortest_path(self, p1: Any, p2: Any) -> TraceResult:
        """
        두 점 사이의 최단 경로를 반환합니다.

        두 점은 각각 그래프 정점이거나 간선 위에 있어야 하며, 임시 분할은 질의가 끝나면 항상 복구됩니다.
        """
        self.init()
        if self._graph is None:
            return TraceResult(path=(), error=PathError.TOO_MANY_FEATURES)

        pt1, pt2 = to_coord(p1), to_coord(p2)
        graph = self._graph

        try:
            v1 = self._splicer.ensure_vertex(graph, pt1)
            if v1 == NOT_FOUND:
                self._logger.log(f"[Tracer] 시작점이 그래프 위에 없습니다: {pt1}", level="DEBUG")
                return TraceResult(path=(), error=PathError.POINT1)

            v2 = self._splicer.ensure_vertex(graph, pt2)
            if v2 == NOT_FOUND:
                self._logger.log(f"[Tracer] 끝점이 그래프 위에 없습니다: {pt2}", level="DEBUG")
                return TraceResult(path=(), error=PathError.POINT2)

            points = self._solver.shortest_path(graph, v1, v2)
        finally:
            self._splicer.revert(graph)

        if len(points) >= 2 and self._offset_params.enabled:
            offset_points = self._offsetter.offset(points, self._offset_params)
            if offset_points is not None:
                points = orient_to_endpoints(offset_points, pt1, pt2)

        if not points:
            return TraceResult(path=(), error=PathError.NO_PATH)
        return TraceResult(path=tuple(tuple(p) for p in points), error=PathError.NONE)

    def is_point_snapped(self, point: Any) -> bool:
        self.init()
        if self._graph is None:
            return False
        return self._splicer.locator.is_on_graph(self._graph, to_coord(point))
