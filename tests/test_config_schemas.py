import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from pydantic import ValidationError

from Service.config import TracerConfig
from Service.schemas import FileLoadRequest, FileSaveRequest, JoinStyle, OffsetParameters
from Service.tracer_service import Tracer


class _RecordingLogger:
    def __init__(self):
        self.records = []

    def log(self, msg, level="DEBUG"):
        self.records.append((level.upper(), msg))


class TracerConfigTests(unittest.TestCase):
    def test_defaults(self):
        config = TracerConfig()
        self.assertEqual(config.epsilon, 1e-6)
        self.assertEqual(config.max_feature_count, 0)
        self.assertFalse(config.snap_invisible_features)
        self.assertFalse(config.enable_noding)
        self.assertEqual(config.offset_join_style, JoinStyle.MITRE)

    def test_environment_overrides(self):
        env = {
            "TRACER_EPSILON": "0.001",
            "TRACER_MAX_FEATURE_COUNT": "500",
            "TRACER_ENABLE_NODING": "true",
            "TRACER_OFFSET_JOIN_STYLE": "round",
        }
        with mock.patch.dict(os.environ, env):
            config = TracerConfig()

        self.assertEqual(config.epsilon, 0.001)
        self.assertEqual(config.max_feature_count, 500)
        self.assertTrue(config.enable_noding)
        self.assertEqual(config.offset_join_style, JoinStyle.ROUND)

    def test_invalid_values_are_rejected(self):
        with self.assertRaises(ValidationError):
            TracerConfig(epsilon=0)
        with self.assertRaises(ValidationError):
            TracerConfig(max_feature_count=-1)
        with self.assertRaises(ValidationError):
            TracerConfig(offset_join_style="square")


class OffsetParametersTests(unittest.TestCase):
    def test_enabled_only_for_nonzero_distance(self):
        self.assertFalse(OffsetParameters().enabled)
        self.assertTrue(OffsetParameters(distance=-0.5).enabled)

    def test_validation_and_immutability(self):
        with self.assertRaises(ValidationError):
            OffsetParameters(quad_segments=0)
        with self.assertRaises(ValidationError):
            OffsetParameters(miter_limit=0.0)

        params = OffsetParameters(distance=1.0)
        with self.assertRaises(ValidationError):
            params.distance = 2.0

    def test_tracer_setters_validate(self):
        tracer = Tracer(_RecordingLogger(), TracerConfig())
        with self.assertRaises(ValidationError):
            tracer.set_offset_parameters(0, "mitre", 5.0)
        with self.assertRaises(ValueError):
            tracer.set_max_feature_count(-1)

        tracer.set_offset_parameters(16, JoinStyle.BEVEL, 3.0)
        self.assertEqual(tracer.offset_parameters(), (16, JoinStyle.BEVEL, 3.0))

    def test_miter_spelling_is_accepted(self):
        self.assertIs(JoinStyle("miter"), JoinStyle.MITRE)
        self.assertEqual(OffsetParameters(join_style="MITER").join_style, JoinStyle.MITRE)
        self.assertEqual(TracerConfig(offset_join_style="miter").offset_join_style, JoinStyle.MITRE)

        tracer = Tracer(_RecordingLogger(), TracerConfig())
        tracer.set_offset_parameters(8, "miter", 2.0)
        self.assertEqual(tracer.offset_parameters(), (8, JoinStyle.MITRE, 2.0))

        with mock.patch.dict(os.environ, {"TRACER_OFFSET_JOIN_STYLE": "miter"}):
            self.assertEqual(TracerConfig().offset_join_style, JoinStyle.MITRE)


class FileRequestTests(unittest.TestCase):
    def test_load_request_checks_suffix_and_existence(self):
        with tempfile.TemporaryDirectory() as tmp:
            existing = Path(tmp) / "lines.geojson"
            existing.write_text("{}", encoding="utf-8")

            self.assertEqual(FileLoadRequest(file_path=existing).file_path, existing.resolve())
            with self.assertRaises(ValidationError):
                FileLoadRequest(file_path=Path(tmp) / "missing.shp")
            with self.assertRaises(ValidationError):
                FileLoadRequest(file_path=Path(tmp) / "lines.csv")

    def test_save_request_requires_shp(self):
        self.assertEqual(FileSaveRequest(output_path=Path("out/path.shp")).output_path.suffix, ".shp")
        with self.assertRaises(ValidationError):
            FileSaveRequest(output_path=Path("out/path.gpkg"))


if __name__ == "__main__":
    unittest.main()
