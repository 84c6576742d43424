"""
Function/log_cleanup.py

보관 기간이 지난 트레이서 로그 파일을 시작 시점에 정리하는 모듈입니다.
"""
import os
import datetime

RETENTION_DAYS = 7
LOG_PREFIX = "Tracer_"


def clean_old_logs(log_dir, logger, retention_days=RETENTION_DAYS):
    """
    로그 디렉토리에서 'Tracer_YYYYMMDD.log' 형식의 파일 중 보관 기간이 지난 파일을 삭제합니다.

    Args:
        log_dir (str): 로그 파일이 저장된 디렉토리 경로
        logger (Log): 로그 기록을 위한 로거 인스턴스
        retention_days (int): 보관 일수

    Returns:
        int: 삭제된 파일 수
    """
    removed = 0
    if not os.path.exists(log_dir):
        logger.log(f"로그 디렉토리 없음: {log_dir} (정리 생략)", level="WARNING")
        return removed

    today = datetime.datetime.now()
    date_start = len(LOG_PREFIX)

    for file_name in os.listdir(log_dir):
        file_path = os.path.join(log_dir, file_name)

        if not (os.path.isfile(file_path) and file_name.startswith(LOG_PREFIX)):
            continue

        date_part = file_name[date_start:date_start + 8]
        if not date_part.isdigit():
            continue

        try:
            file_date = datetime.datetime.strptime(date_part, "%Y%m%d")
        except ValueError:
            logger.log(f"잘못된 로그 파일 형식 (삭제 스킵): {file_name}", level="WARNING")
            continue

        if (today - file_date).days <= retention_days:
            continue

        try:
            os.remove(file_path)
        except OSError as e:
            logger.log(f"로그 파일 삭제 실패: {file_name} - {e}", level="WARNING")
            continue

        removed += 1
        logger.log(f"오래된 로그 파일 삭제: {file_name}", level="INFO")

    return removed
