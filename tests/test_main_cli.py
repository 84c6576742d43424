import tempfile
import unittest
from pathlib import Path
from unittest import mock

import geopandas as gpd
from shapely.geometry import LineString

import main


class _RecordingLogger:
    def __init__(self, log_dir):
        self.log_dir = log_dir
        self.records = []

    def log(self, msg, level="DEBUG"):
        self.records.append((level.upper(), msg))


class MainCliTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.logger = _RecordingLogger(str(self.tmp / "Log"))

        self.layer_path = self.tmp / "lines.geojson"
        gpd.GeoDataFrame(
            geometry=[LineString([(0, 0), (5, 0), (10, 0)]), LineString([(10, 0), (10, 10)])],
            crs="EPSG:3857",
        ).to_file(self.layer_path, driver="GeoJSON")

    def tearDown(self):
        self._tmp.cleanup()

    def _run(self, *args):
        with mock.patch.object(main, "Log", return_value=self.logger):
            with self.assertRaises(SystemExit) as ctx:
                main.main([str(self.layer_path), *args])
        return ctx.exception.code

    def test_trace_and_save(self):
        output = self.tmp / "out" / "path.shp"
        code = self._run("--start", "2", "0", "--end", "10", "4", "--output", str(output))

        self.assertEqual(code, 0)
        saved = gpd.read_file(output)
        self.assertAlmostEqual(saved.iloc[0]["length"], 12.0)

    def test_trace_error_exit_code(self):
        self.assertEqual(self._run("--start", "3", "3", "--end", "10", "4"), 2)
        self.assertTrue(any("POINT1" in msg for _, msg in self.logger.records))

    def test_fatal_error_exit_code(self):
        self.layer_path = self.tmp / "missing.shp"
        self.assertEqual(self._run("--start", "0", "0", "--end", "10", "0"), 1)
        self.assertTrue(any(level == "ERROR" for level, _ in self.logger.records))


if __name__ == "__main__":
    unittest.main()
