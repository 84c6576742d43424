import unittest

from shapely.geometry import LineString

from Service.gis_modules.tracer import (
    LineworkNoder,
    PathOffsetter,
    TracerGraphBuilder,
    TracerGraphDiagnostics,
    orient_to_endpoints,
)
from Service.schemas import OffsetParameters


class _RecordingLogger:
    def __init__(self):
        self.records = []

    def log(self, msg, level="DEBUG"):
        self.records.append((level.upper(), msg))


class LineworkNoderTests(unittest.TestCase):
    def test_crossing_lines_are_split(self):
        result = LineworkNoder(_RecordingLogger()).node([
            LineString([(0, 0), (10, 0)]),
            LineString([(5, -5), (5, 5)]),
        ])
        self.assertFalse(result.topology_problem)
        self.assertEqual(len(result.lines), 4)
        self.assertAlmostEqual(sum(ln.length for ln in result.lines), 20.0)

    def test_empty_input(self):
        result = LineworkNoder(_RecordingLogger()).node([LineString()])
        self.assertEqual(result.lines, [])


class PathOffsetterTests(unittest.TestCase):
    def setUp(self):
        self.offsetter = PathOffsetter(_RecordingLogger())

    def test_zero_distance_is_disabled(self):
        self.assertIsNone(self.offsetter.offset([(0, 0), (1, 0)], OffsetParameters()))

    def test_offset_to_the_left(self):
        coords = self.offsetter.offset([(0, 0), (10, 0)], OffsetParameters(distance=2.0))
        self.assertEqual(len(coords), 2)
        self.assertTrue(all(abs(y - 2.0) < 1e-9 for _, y in coords))

    def test_orient_to_endpoints(self):
        coords = [(10.0, 1.0), (0.0, 1.0)]
        self.assertEqual(orient_to_endpoints(coords, (0, 0), (10, 0)), [(0.0, 1.0), (10.0, 1.0)])
        self.assertEqual(orient_to_endpoints(coords, (10, 0), (0, 0)), coords)
        self.assertEqual(orient_to_endpoints([(1.0, 1.0)], (0, 0), (10, 0)), [(1.0, 1.0)])


class TracerGraphDiagnosticsTests(unittest.TestCase):
    def test_report_counts(self):
        logger = _RecordingLogger()
        graph = TracerGraphBuilder(logger).build([
            LineString([(0, 0), (1, 0)]),
            LineString([(1, 0), (2, 0)]),
            LineString([(5, 5), (6, 5)]),
            LineString([(9, 9), (9, 9)]),
        ])
        report = TracerGraphDiagnostics(logger).report(graph)

        self.assertEqual(report["vertices"], 6)
        self.assertEqual(report["edges"], 4)
        self.assertEqual(report["components"], 3)
        self.assertEqual(report["dangles"], 4)
        self.assertEqual(report["zero_length_edges"], 1)
        self.assertTrue(any(level == "WARNING" for level, _ in logger.records))

    def test_empty_graph(self):
        logger = _RecordingLogger()
        report = TracerGraphDiagnostics(logger).report(TracerGraphBuilder(logger).build([]))
        self.assertEqual(report["components"], 0)


if __name__ == "__main__":
    unittest.main()
