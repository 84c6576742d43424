"""
Service/config.py

트레이서(경로 추적) 엔진의 동작을 제어하는 설정 모듈입니다.
"""
from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from Service.schemas import JoinStyle


class TracerConfig(BaseSettings):
    """
    그래프 구축과 최단 경로 질의의 핵심 파라미터를 정의하는 설정 클래스입니다.
    """

    epsilon: float = Field(
        default=1e-6,
        gt=0.0,
        description="정점 일치/선 위 판정에 사용하는 좌표 허용 오차(좌표계 단위)"
    )

    max_feature_count: int = Field(
        default=0,
        ge=0,
        description="그래프 구축 시 허용하는 최대 객체 수 (0이면 제한 없음)"
    )

    snap_invisible_features: bool = Field(
        default=False,
        description="렌더링되지 않는 객체도 그래프에 포함할지 여부"
    )

    enable_noding: bool = Field(
        default=False,
        description="그래프 구축 전 교차점 분할(noding) 수행 여부"
    )

    offset_distance: float = Field(
        default=0.0,
        description="결과 경로의 평행 이동 거리 (0이면 미적용, 부호로 좌/우 결정)"
    )

    offset_quad_segments: int = Field(
        default=8,
        ge=1,
        description="오프셋 곡선의 1/4 원호 분할 수"
    )

    offset_join_style: JoinStyle = Field(
        default=JoinStyle.MITRE,
        description="오프셋 곡선의 꺾임부 연결 방식"
    )

    offset_miter_limit: float = Field(
        default=5.0,
        gt=0.0,
        description="mitre 연결 시 허용하는 최대 돌출 비율"
    )

    debug_graph_diagnostics: bool = Field(
        default=False,
        description="디버그 모드: 그래프 구축 직후 연결성 진단 로그 출력 여부"
    )

    @field_validator("offset_join_style", mode="before")
    @classmethod
    def normalize_join_style(cls, v):
        return JoinStyle(v) if isinstance(v, str) else v

    model_config = SettingsConfigDict(
        env_prefix="TRACER_",
        env_file=".env",
        env_file_encoding="utf-8",
    )
