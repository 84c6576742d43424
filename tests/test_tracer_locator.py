import unittest

from shapely.geometry import LineString

from Service.gis_modules.tracer import NOT_FOUND, SpatialLocator, TracerGraphBuilder
from Service.gis_modules.tracer.locator import closest_segment


class _RecordingLogger:
    def __init__(self):
        self.records = []

    def log(self, msg, level="DEBUG"):
        self.records.append((level.upper(), msg))


class SpatialLocatorTests(unittest.TestCase):
    def setUp(self):
        builder = TracerGraphBuilder(_RecordingLogger(), epsilon=1e-6)
        self.graph = builder.build([
            LineString([(0, 0), (10, 0), (10, 10), (20, 10)]),
            LineString([(0, 0), (0, 10)]),
        ])
        self.locator = SpatialLocator(1e-6)

    def test_locate_vertex_exact_and_within_epsilon(self):
        self.assertEqual(self.locator.locate_vertex(self.graph, (0.0, 0.0)), 0)
        self.assertEqual(self.locator.locate_vertex(self.graph, (20.0 + 4e-7, 10.0 - 4e-7)), 1)

    def test_locate_vertex_ignores_z(self):
        self.assertEqual(self.locator.locate_vertex(self.graph, (0.0, 10.0, 99.0)), 2)

    def test_locate_vertex_not_found(self):
        self.assertEqual(self.locator.locate_vertex(self.graph, (5.0, 0.0)), NOT_FOUND)

    def test_locate_edge_reports_vertex_after(self):
        hit = self.locator.locate_edge(self.graph, (10.0, 5.0))
        self.assertIsNotNone(hit)
        self.assertEqual(hit.edge_index, 0)
        self.assertEqual(hit.vertex_after, 2)

        hit = self.locator.locate_edge(self.graph, (15.0, 10.0))
        self.assertEqual(hit.vertex_after, 3)

    def test_locate_edge_requires_point_on_linework(self):
        self.assertIsNone(self.locator.locate_edge(self.graph, (5.0, 0.01)))
        self.assertIsNone(self.locator.locate_edge(self.graph, (50.0, 50.0)))

    def test_locate_edge_skips_inactive_edges(self):
        self.graph.inactive_edges.add(1)
        self.assertIsNone(self.locator.locate_edge(self.graph, (0.0, 5.0)))
        self.graph.inactive_edges.clear()
        self.assertEqual(self.locator.locate_edge(self.graph, (0.0, 5.0)).edge_index, 1)

    def test_is_on_graph(self):
        self.assertTrue(self.locator.is_on_graph(self.graph, (0.0, 0.0)))
        self.assertTrue(self.locator.is_on_graph(self.graph, (3.0, 0.0)))
        self.assertFalse(self.locator.is_on_graph(self.graph, (3.0, 3.0)))


class ClosestSegmentTests(unittest.TestCase):
    def test_projection_and_clamping(self):
        coords = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0)]

        dist, after, pt = closest_segment(coords, (4.0, 3.0))
        self.assertAlmostEqual(dist, 3.0)
        self.assertEqual(after, 1)
        self.assertEqual(pt, (4.0, 0.0))

        dist, after, _ = closest_segment(coords, (13.0, 14.0))
        self.assertAlmostEqual(dist, 5.0)
        self.assertEqual(after, 2)

    def test_degenerate_segment(self):
        dist, after, _ = closest_segment([(1.0, 1.0), (1.0, 1.0)], (4.0, 5.0))
        self.assertAlmostEqual(dist, 5.0)
        self.assertEqual(after, 1)


if __name__ == "__main__":
    unittest.main()
