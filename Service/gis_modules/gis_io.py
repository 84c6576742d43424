"""
Service/gis_modules/gis_io.py

트레이서 입력 선형 레이어의 로드와 추적 결과 경로의 저장을 담당하는 모듈입니다.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Sequence, Set

import geopandas as gpd
from shapely.geometry import LineString

from Common.log import Log
from Function.decorators import log_execution_time, safe_run
from Service.schemas import FileLoadRequest, FileSaveRequest


class GISIO:
    """
    선형 레이어 파일을 로드하고 추적 결과를 SHP 파일로 저장합니다.
    """

    _ALLOWED_INPUT_TYPES: Set[str] = {"LineString", "MultiLineString", "Polygon", "MultiPolygon"}

    def __init__(self, logger: Log):
        self._logger = logger

    @safe_run
    @log_execution_time
    def load(self, request: FileLoadRequest) -> gpd.GeoDataFrame:
        """
        레이어 파일을 로드하고 데이터 존재 여부와 좌표계(CRS), geometry 타입을 검증합니다.

        Args:
            request (FileLoadRequest): 파일 경로를 포함한 로드 요청 객체

        Returns:
            gpd.GeoDataFrame: 로드된 지리 정보 데이터
        """
        file_path = request.file_path.expanduser().resolve()

        gdf = gpd.read_file(file_path)

        if gdf.empty:
            raise ValueError(f"로드된 데이터가 비어있습니다: {file_path.name}")

        if gdf.crs is None:
            raise ValueError(f"입력 데이터에 CRS가 없습니다: {file_path.name}")

        geom_types = set(gdf.geometry.dropna().geom_type.unique())
        if not geom_types & self._ALLOWED_INPUT_TYPES:
            raise ValueError(f"선형/면형 geometry가 없습니다. 현재 타입: {sorted(geom_types)}")

        crs_name = getattr(gdf.crs, "name", None) or "Unknown"
        self._logger.log(
            f"레이어 로드 - {file_path.name}, 객체 수: {len(gdf)}, CRS: {crs_name}, EPSG: {self._try_to_epsg(gdf)}",
            level="INFO",
        )
        return gdf

    @safe_run
    @log_execution_time
    def save_path(self, coords: Sequence[Sequence[float]], request: FileSaveRequest, crs: Any = None, **attributes: Any) -> Path:
        """
        추적 결과 좌표열을 단일 LineString 객체로 저장합니다.

        Args:
            coords: 경로 좌표열 (2개 이상)
            request (FileSaveRequest): 저장 경로를 포함한 요청 객체
            crs: 결과 좌표계

        Returns:
            Path: 저장된 파일의 경로
        """
        if len(coords) < 2:
            raise ValueError("저장할 경로 좌표가 2개 미만입니다.")

        line = LineString(coords)
        row = {"length": float(line.length)}
        row.update(attributes)
        gdf = gpd.GeoDataFrame([row], geometry=[line], crs=crs)
        output_path = request.output_path.expanduser().resolve()
        output_path.parent.mkdir(parents=True, exist_ok=True)

        gdf.to_file(output_path, driver="ESRI Shapefile", encoding="utf-8")

        self._logger.log(f"경로 저장 완료: {output_path}", level="INFO")
        return output_path

    def _try_to_epsg(self, gdf: gpd.GeoDataFrame) -> Optional[int]:
        """좌표계 정보를 EPSG 코드로 변환 시도합니다."""
        try:
            return gdf.crs.to_epsg()
        except Exception:
            return None
