"""
Function/decorators.py

트레이서 각 단계의 실행 시간 측정 및 예외 기록을 위한 데코레이터 모듈입니다.
"""
from __future__ import annotations

import functools
import logging
import time
import traceback
from typing import Any, Callable, ParamSpec, TypeVar, Optional

P = ParamSpec("P")
R = TypeVar("R")


def _resolve_custom_logger(instance: Any) -> Optional[Any]:
    """
    인스턴스(self)가 `log` 메서드를 가진 로거를 보유하고 있으면 반환합니다.

    Args:
        instance (Any): 클래스 인스턴스(self)

    Returns:
        Optional[Any]: 로거 인스턴스 또는 None
    """
    if instance is None:
        return None

    for attr in ("_logger", "logger"):
        candidate = getattr(instance, attr, None)
        if candidate is not None and hasattr(candidate, "log"):
            return candidate

    return None


def log_execution_time(func: Callable[P, R]) -> Callable[P, R]:
    """
    함수의 시작과 종료를 DEBUG 레벨로 기록하고 소요 시간(ms)을 남기는 데코레이터입니다.

    그래프 구축처럼 반복 호출되는 연산에 붙이므로 완료 로그도 DEBUG로 기록합니다.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        instance = args[0] if args else None
        custom_logger = _resolve_custom_logger(instance)

        func_name = func.__qualname__
        started = time.perf_counter()

        if custom_logger:
            custom_logger.log(f"▶ [시작] {func_name}", level="DEBUG")
        else:
            logging.debug("▶ [시작] %s", func_name)

        result = func(*args, **kwargs)

        elapsed_ms = (time.perf_counter() - started) * 1000.0
        msg = f"◀ [완료] {func_name} (소요 시간: {elapsed_ms:.1f}ms)"

        if custom_logger:
            custom_logger.log(msg, level="DEBUG")
        else:
            logging.debug(msg)

        return result

    return wrapper


def safe_run(func: Callable[P, R]) -> Callable[P, R]:
    """
    함수 실행 중 발생한 예외의 Traceback을 로그에 남기고 예외를 그대로 재전파합니다.

    Raises:
        Exception: 원본 함수에서 발생한 예외
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        instance = args[0] if args else None
        custom_logger = _resolve_custom_logger(instance)

        try:
            return func(*args, **kwargs)
        except Exception:
            log_msg = f"'{func.__qualname__}' 실행 중 오류 발생\n[Traceback]\n{traceback.format_exc()}"

            if custom_logger:
                custom_logger.log(log_msg, level="ERROR")
            else:
                logging.error(log_msg)

            raise

    return wrapper
