import logging
import datetime
import os
import sys


class Log:
    def __init__(self, log_dir="Log", echo=True):
        # 실행 파일(또는 스크립트) 기준 폴더
        if getattr(sys, 'frozen', False):
            program_dir = os.path.dirname(os.path.abspath(sys.executable))
        else:
            program_dir = os.path.dirname(os.path.abspath(__file__))

        self.log_dir = os.path.join(program_dir, log_dir)
        os.makedirs(self.log_dir, exist_ok=True)

        # 로그 파일명은 'Tracer_YYYYMMDD.log' 형식
        self.log_file = os.path.join(self.log_dir, f'Tracer_{self._current_date_str()}.log')
        self._echo = echo

        logging.basicConfig(
            filename=self.log_file,
            level=logging.DEBUG,
            format='%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%Y/%m/%d %H:%M:%S',
            encoding='utf-8'
        )

    def _current_date_str(self):
        return datetime.datetime.now().strftime("%Y%m%d")

    def log(self, msg, level='DEBUG'):
        """지정된 로그 레벨로 메시지를 기록하고 콘솔에도 출력합니다."""
        level = level.upper()
        if level == "ERROR":
            logging.error(msg)
        elif level == "INFO":
            logging.info(msg)
        elif level == "WARNING":
            logging.warning(msg)
        elif level == "DEBUG":
            logging.debug(msg)
        else:
            print(f"알 수 없는 로그 레벨: {level}")
            return

        # DEBUG는 파일에만 남깁니다.
        if self._echo and level != "DEBUG":
            print(f"{level}: {msg}")

    def get_log_paths(self):
        """현재 로그 파일 경로를 반환하는 메서드."""
        return self.log_file
