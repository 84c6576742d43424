"""
main.py

명령행에서 선형 레이어를 읽어 두 점 사이의 추적 경로를 계산하는 진입점이며,
객체 생성 및 의존성 주입(Composition Root)을 담당합니다.
"""
from __future__ import annotations

import argparse
import sys
import traceback
from pathlib import Path
from typing import List, NoReturn, Optional

from Common.log import Log
from Function.log_cleanup import clean_old_logs
from Service.config import TracerConfig
from Service.container import build_app
from Service.layer_source import LineLayer
from Service.schemas import FileLoadRequest, FileSaveRequest
from Service.tracer_service import PathError


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="선형 레이어를 따라 두 점 사이의 최단 경로를 추적합니다.")
    parser.add_argument("layers", nargs="+", help="입력 선형/면형 레이어 파일 (.shp, .gpkg, .geojson)")
    parser.add_argument("--start", nargs=2, type=float, required=True, metavar=("X", "Y"), help="시작점 좌표")
    parser.add_argument("--end", nargs=2, type=float, required=True, metavar=("X", "Y"), help="끝점 좌표")
    parser.add_argument("--offset", type=float, default=None, help="결과 경로 오프셋 거리")
    parser.add_argument("--max-features", type=int, default=None, help="그래프 구축 최대 객체 수 (0: 무제한)")
    parser.add_argument("--noding", action="store_true", help="교차점 분할(noding) 수행")
    parser.add_argument("--output", type=Path, default=None, help="결과 경로를 저장할 SHP 파일")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> NoReturn:
    args = _parse_args(argv)
    logger = Log()

    try:
        logger.log("=== 트레이서 실행 시작 ===", level="INFO")
        clean_old_logs(logger.log_dir, logger)

        overrides = {}
        if args.noding:
            overrides["enable_noding"] = True
        if args.max_features is not None:
            overrides["max_feature_count"] = args.max_features
        if args.offset is not None:
            overrides["offset_distance"] = args.offset

        built = build_app(logger, TracerConfig(**overrides))

        layers = []
        for raw_path in args.layers:
            gdf = built.gis_io.load(FileLoadRequest(file_path=Path(raw_path)))
            layers.append(LineLayer(Path(raw_path).stem, gdf))

        tracer = built.tracer
        tracer.set_destination_crs(layers[0].crs)
        tracer.set_layers(layers)

        result = tracer.find_shortest_path(tuple(args.start), tuple(args.end))

        if result.error != PathError.NONE:
            logger.log(f"경로 추적 실패: {result.error.name}", level="WARNING")
            sys.exit(2)

        logger.log(f"경로 추적 완료 - 좌표 수: {len(result.path)}, 길이: {result.length:.3f}", level="INFO")

        if args.output is not None and len(result.path) >= 2:
            built.gis_io.save_path(result.path, FileSaveRequest(output_path=args.output), crs=layers[0].crs)

        logger.log("=== 트레이서 정상 종료 ===", level="INFO")
        sys.exit(0)

    except Exception:
        logger.log(f"실행 중 치명적 오류 발생:\n{traceback.format_exc()}", level="ERROR")
        sys.exit(1)


if __name__ == "__main__":
    main()
