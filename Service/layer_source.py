"""
Service/layer_source.py

트레이서의 입력 선형 데이터를 제공하고, 데이터 변경 시 시그널을 송신하는 레이어 모듈입니다.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, NamedTuple, Optional, Tuple

import geopandas as gpd
import pandas as pd
from PySide6.QtCore import QObject, Signal


class Feature(NamedTuple):
    """레이어의 단일 객체 (식별자, geometry, 속성)."""
    fid: Any
    geometry: Any
    attributes: Dict[str, Any]


@dataclass(frozen=True)
class RenderContext:
    """
    렌더링 가시성 판정에 전달되는 문맥 정보입니다.
    """
    scale: float = 0.0
    variables: Dict[str, Any] = field(default_factory=dict)


Renderer = Callable[[Feature, RenderContext], bool]


@dataclass(frozen=True)
class FeatureRequest:
    """
    객체 조회 조건입니다. extent는 좌표 변환 후의 (xmin, ymin, xmax, ymax)입니다.
    """
    destination_crs: Any = None
    extent: Optional[Tuple[float, float, float, float]] = None
    visibility: Optional[Callable[[Feature], bool]] = None


class LineLayer(QObject):
    """
    GeoDataFrame을 감싸는 선형/면형 레이어입니다.

    객체 추가/삭제/수정, 스타일 변경 시 시그널을 송신하며, 트레이서는 이를 구독해 그래프를 무효화합니다.
    """

    featureAdded = Signal(object)
    featureDeleted = Signal(object)
    geometryChanged = Signal(object, object)
    attributeValueChanged = Signal(object, str, object)
    dataChanged = Signal()
    styleChanged = Signal()
    willBeDeleted = Signal(object)

    def __init__(self, name: str, gdf: gpd.GeoDataFrame, renderer: Optional[Renderer] = None, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._name = name
        self._gdf = gdf
        self._renderer = renderer

    @property
    def name(self) -> str:
        return self._name

    @property
    def crs(self) -> Any:
        return self._gdf.crs

    @property
    def renderer(self) -> Optional[Renderer]:
        return self._renderer

    def feature_count(self) -> int:
        return len(self._gdf)

    def get_features(self, request: Optional[FeatureRequest] = None) -> Iterator[Feature]:
        """
        조회 조건에 맞는 객체를 순차적으로 반환합니다. 호출할 때마다 새 조회가 시작됩니다.
        """
        request = request or FeatureRequest()
        gdf = self._gdf
        if gdf.empty:
            return

        if request.destination_crs is not None and gdf.crs is not None and gdf.crs != request.destination_crs:
            gdf = gdf.to_crs(request.destination_crs)

        if request.extent is not None:
            xmin, ymin, xmax, ymax = request.extent
            gdf = gdf.cx[xmin:xmax, ymin:ymax]

        geom_col = gdf.geometry.name
        attr_cols = [c for c in gdf.columns if c != geom_col]

        for fid, row in gdf.iterrows():
            feature = Feature(fid=fid, geometry=row[geom_col], attributes={c: row[c] for c in attr_cols})
            if request.visibility is not None and not request.visibility(feature):
                continue
            yield feature

    def add_feature(self, geometry: Any, **attributes: Any) -> Any:
        fid = int(self._gdf.index.max()) + 1 if len(self._gdf) else 0
        geom_col = self._gdf.geometry.name
        row = gpd.GeoDataFrame(
            [attributes],
            index=[fid],
            geometry=gpd.GeoSeries([geometry], index=[fid], crs=self._gdf.crs),
            crs=self._gdf.crs,
        )
        if geom_col != row.geometry.name:
            row = row.rename_geometry(geom_col)
        self._gdf = pd.concat([self._gdf, row])
        self.featureAdded.emit(fid)
        return fid

    def delete_feature(self, fid: Any) -> None:
        self._gdf = self._gdf.drop(index=fid)
        self.featureDeleted.emit(fid)

    def change_geometry(self, fid: Any, geometry: Any) -> None:
        self._gdf.loc[fid, self._gdf.geometry.name] = geometry
        self.geometryChanged.emit(fid, geometry)

    def change_attribute_value(self, fid: Any, column: str, value: Any) -> None:
        self._gdf.loc[fid, column] = value
        self.attributeValueChanged.emit(fid, column, value)

    def replace_data(self, gdf: gpd.GeoDataFrame) -> None:
        self._gdf = gdf
        self.dataChanged.emit()

    def set_renderer(self, renderer: Optional[Renderer]) -> None:
        self._renderer = renderer
        self.styleChanged.emit()

    def delete_layer(self) -> None:
        """레이어 제거를 알립니다. 구독자는 이 레이어에 대한 참조를 정리해야 합니다."""
        self.willBeDeleted.emit(self)
