"""
Service/schemas.py

입출력 요청과 오프셋 파라미터의 구조를 정의하고 유효성을 검증하는 스키마 모듈입니다.
"""
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

_READABLE_SUFFIXES = {".shp", ".gpkg", ".geojson"}


class JoinStyle(str, Enum):
    """오프셋 곡선의 꺾임부 연결 방식 (shapely join_style 문자열과 동일)."""
    ROUND = "round"
    MITRE = "mitre"
    BEVEL = "bevel"

    @classmethod
    def _missing_(cls, value):
        # "miter" 철자도 허용합니다.
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized == "miter":
                return cls.MITRE
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class OffsetParameters(BaseModel):
    """
    결과 경로를 평행 이동할 때 사용하는 파라미터 묶음입니다.
    """
    distance: float = Field(default=0.0, description="오프셋 거리 (양수: 진행 방향 왼쪽)")
    quad_segments: int = Field(default=8, ge=1, description="1/4 원호 분할 수")
    join_style: JoinStyle = Field(default=JoinStyle.MITRE, description="꺾임부 연결 방식")
    miter_limit: float = Field(default=5.0, gt=0.0, description="mitre 돌출 제한 비율")

    @field_validator("join_style", mode="before")
    @classmethod
    def normalize_join_style(cls, v):
        return JoinStyle(v) if isinstance(v, str) else v

    model_config = ConfigDict(frozen=True)

    @property
    def enabled(self) -> bool:
        return self.distance != 0.0


class FileLoadRequest(BaseModel):
    """
    선형 레이어 로드 요청을 위한 데이터 모델입니다.
    """
    file_path: Path = Field(..., description="읽어올 선형 레이어 파일 경로")

    @field_validator("file_path")
    @classmethod
    def validate_extension(cls, v: Path) -> Path:
        if v.suffix.lower() not in _READABLE_SUFFIXES:
            raise ValueError(f"지원하지 않는 파일 형식입니다. ({', '.join(sorted(_READABLE_SUFFIXES))}): {v.suffix}")
        return v

    @field_validator("file_path")
    @classmethod
    def validate_existence(cls, v: Path) -> Path:
        resolved_path = v.resolve()
        if not resolved_path.exists() or not resolved_path.is_file():
            raise ValueError(f"파일을 찾을 수 없습니다: {resolved_path}")
        return resolved_path


class FileSaveRequest(BaseModel):
    """
    추적 결과 저장 요청을 위한 데이터 모델입니다.
    """
    output_path: Path = Field(..., description="결과를 저장할 파일 경로")

    @field_validator("output_path")
    @classmethod
    def validate_extension(cls, v: Path) -> Path:
        if v.suffix.lower() != ".shp":
            raise ValueError(f"저장 파일 형식은 .shp여야 합니다: {v.suffix}")
        return v.resolve()
