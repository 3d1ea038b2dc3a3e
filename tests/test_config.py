import contextlib
import io
import tempfile
import unittest
from pathlib import Path

from analytics.config import EngineConfig
from eraquiz.config import load_config, validate_config
from pydantic import ValidationError


class LoadConfigTests(unittest.TestCase):
    def test_package_defaults(self) -> None:
        cfg = validate_config(load_config())
        self.assertEqual(cfg["quiz"]["figures_per_session"], 40)
        self.assertEqual(cfg["quiz"]["min_figures"], 5)
        self.assertEqual(cfg["estimator"]["floor_year"], 1950)
        self.assertEqual(cfg["storage"]["backend"], "parquet")
        self.assertFalse(cfg["explain"])

    def test_yaml_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "cfg.yml"
            path.write_text("quiz:\n  figures_per_session: 12\nexplain: true\n", encoding="utf-8")
            cfg = validate_config(load_config(str(path)))
        self.assertEqual(cfg["quiz"]["figures_per_session"], 12)
        self.assertEqual(cfg["estimator"]["padding_years"], 3)
        self.assertTrue(cfg["explain"])

    def test_empty_sections_get_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "cfg.yml"
            path.write_text("quiz:\nestimator:\ncandidates:\nstorage:\n", encoding="utf-8")
            cfg = validate_config(load_config(str(path)))
        self.assertEqual(cfg["quiz"]["min_figures"], 5)
        self.assertEqual(cfg["estimator"]["padding_years"], 3)
        self.assertEqual(cfg["candidates"]["path"], "./data/popular_people.json")
        self.assertEqual(cfg["storage"]["backend"], "parquet")

    def test_missing_file_exits(self) -> None:
        err = io.StringIO()
        with contextlib.redirect_stderr(err):
            with self.assertRaises(SystemExit) as ctx:
                load_config("/nonexistent/eraquiz.yml")
        self.assertEqual(ctx.exception.code, 2)
        self.assertIn("Config file not found", err.getvalue())


class ValidateConfigTests(unittest.TestCase):
    def _validate(self, cfg):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            result = validate_config(cfg)
        return result, out.getvalue()

    def test_empty_gets_defaults_silently(self) -> None:
        cfg, printed = self._validate({})
        self.assertEqual(printed, "")
        self.assertEqual(cfg["candidates"]["image_base_url"], "https://image.tmdb.org/t/p/w500")

    def test_non_positive_counts_replaced(self) -> None:
        cfg, printed = self._validate({"quiz": {"figures_per_session": 0, "min_figures": "x"}})
        self.assertEqual(cfg["quiz"]["figures_per_session"], 40)
        self.assertEqual(cfg["quiz"]["min_figures"], 5)
        self.assertIn("WARNING", printed)

    def test_session_size_raised_to_minimum(self) -> None:
        cfg, printed = self._validate({"quiz": {"figures_per_session": 3, "min_figures": 5}})
        self.assertEqual(cfg["quiz"]["figures_per_session"], 5)
        self.assertIn("raising it", printed)

    def test_unknown_backend_falls_back(self) -> None:
        cfg, printed = self._validate({"storage": {"backend": "redis"}})
        self.assertEqual(cfg["storage"]["backend"], "parquet")
        self.assertIn("Unsupported storage backend", printed)


class EngineConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        cfg = EngineConfig()
        self.assertEqual(cfg.floor_year, 1950)
        self.assertEqual(cfg.smoothing_window, 5)
        self.assertEqual(cfg.default_peak_decade, "1990s")

    def test_bounds_enforced(self) -> None:
        with self.assertRaises(ValidationError):
            EngineConfig(breadth_fraction=1.5)
        with self.assertRaises(ValidationError):
            EngineConfig(smoothing_window=0)


if __name__ == "__main__":
    unittest.main()
