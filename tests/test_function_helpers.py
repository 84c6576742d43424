import datetime
import os
import tempfile
import unittest

from shapely.geometry import LineString, Point

from Function.decorators import log_execution_time, safe_run
from Function.log_cleanup import LOG_PREFIX, clean_old_logs
from Function.utils import to_coord


class _RecordingLogger:
    def __init__(self):
        self.records = []

    def log(self, msg, level="DEBUG"):
        self.records.append((level.upper(), msg))


class _Worker:
    def __init__(self, logger):
        self._logger = logger

    @safe_run
    @log_execution_time
    def run(self, value):
        if value < 0:
            raise ValueError("negative")
        return value * 2


class DecoratorTests(unittest.TestCase):
    def test_execution_time_is_logged_at_debug(self):
        logger = _RecordingLogger()
        self.assertEqual(_Worker(logger).run(3), 6)

        levels = [level for level, _ in logger.records]
        self.assertEqual(levels, ["DEBUG", "DEBUG"])
        self.assertIn("_Worker.run", logger.records[-1][1])

    def test_safe_run_logs_traceback_and_reraises(self):
        logger = _RecordingLogger()
        with self.assertRaises(ValueError):
            _Worker(logger).run(-1)

        errors = [msg for level, msg in logger.records if level == "ERROR"]
        self.assertEqual(len(errors), 1)
        self.assertIn("Traceback", errors[0])


class LogCleanupTests(unittest.TestCase):
    def test_only_expired_tracer_logs_are_removed(self):
        logger = _RecordingLogger()
        today = datetime.datetime.now()
        old = (today - datetime.timedelta(days=30)).strftime("%Y%m%d")
        recent = (today - datetime.timedelta(days=1)).strftime("%Y%m%d")

        with tempfile.TemporaryDirectory() as tmp:
            names = [f"{LOG_PREFIX}{old}.log", f"{LOG_PREFIX}{recent}.log", f"{LOG_PREFIX}bad.log", "other.log"]
            for name in names:
                with open(os.path.join(tmp, name), "w", encoding="utf-8") as f:
                    f.write("x")

            removed = clean_old_logs(tmp, logger)

            self.assertEqual(removed, 1)
            self.assertEqual(sorted(os.listdir(tmp)), sorted(names[1:]))

    def test_missing_directory_is_skipped(self):
        logger = _RecordingLogger()
        self.assertEqual(clean_old_logs("/nonexistent/tracer-logs", logger), 0)
        self.assertEqual(logger.records[0][0], "WARNING")


class ToCoordTests(unittest.TestCase):
    def test_points_and_sequences(self):
        self.assertEqual(to_coord(Point(1, 2)), (1.0, 2.0))
        self.assertEqual(to_coord((1, 2, 3, 4)), (1.0, 2.0, 3.0))
        self.assertEqual(to_coord([5, 6]), (5.0, 6.0))

    def test_invalid_inputs(self):
        with self.assertRaises(ValueError):
            to_coord((1,))
        with self.assertRaises(ValueError):
            to_coord(LineString([(0, 0), (1, 1)]))


if __name__ == "__main__":
    unittest.main()
