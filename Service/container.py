"""
Service/container.py

트레이서와 입출력 모듈을 생성하고 의존성을 주입하여 실행 가능한 상태로 조립합니다.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from Common.log import Log

from Service.config import TracerConfig
from Service.gis_modules import (
    GISIO,
    GraphSplicer,
    LineworkNoder,
    PathOffsetter,
    ShortestPathSolver,
    SpatialLocator,
    TracerGraphBuilder,
    TracerGraphDiagnostics,
)
from Service.tracer_service import Tracer


@dataclass(frozen=True)
class BuiltApp:
    """조립이 완료된 서비스 객체 묶음입니다."""
    config: TracerConfig
    gis_io: GISIO
    tracer: Tracer


def build_app(logger: Log, config: Optional[TracerConfig] = None) -> BuiltApp:
    """
    설정을 로드하고 트레이서 내부 모듈의 의존성을 주입하여 BuiltApp 객체를 생성합니다.
    """
    config = config or TracerConfig()

    gis_io = GISIO(logger)

    locator = SpatialLocator(config.epsilon)
    builder = TracerGraphBuilder(logger, config.epsilon)
    splicer = GraphSplicer(logger, locator)
    solver = ShortestPathSolver(logger)
    noder = LineworkNoder(logger)
    offsetter = PathOffsetter(logger)
    diagnostics = TracerGraphDiagnostics(logger)

    tracer = Tracer(
        logger=logger,
        config=config,
        builder=builder,
        splicer=splicer,
        solver=solver,
        noder=noder,
        offsetter=offsetter,
        diagnostics=diagnostics,
    )

    return BuiltApp(config=config, gis_io=gis_io, tracer=tracer)
