import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config.scoring import get_scoring_config, get_scoring_value  # noqa: E402
from app.features.patterns import build_engine_config, get_default_engine_config  # noqa: E402
from app.schemas.analysis import INDUSTRIES, LEVELS, SECTION_NAMES  # noqa: E402


class ScoringConfigTests(unittest.TestCase):
    def test_loader_and_value_lookup(self):
        config = get_scoring_config()
        self.assertIsInstance(config, dict)
        self.assertEqual(get_scoring_value("engine.ats.points_per_section"), 20)
        self.assertEqual(get_scoring_value("engine.job_match.required_weight"), 70)
        self.assertIsNone(get_scoring_value("engine.does.not.exist"))
        self.assertEqual(get_scoring_value("engine.does.not.exist", 5), 5)

    def test_shipped_yaml_builds_an_engine_config(self):
        config = build_engine_config(get_scoring_config()["engine"])
        self.assertTrue(config.stop_words)
        for word in config.stop_words:
            self.assertIsInstance(word, str)
        self.assertIn("on", config.stop_words)
        self.assertIn("qualifications", config.job_match.required_anchors)
        self.assertIn("plus", config.job_match.preferred_anchors)

    def test_default_engine_config_covers_every_industry_level_and_section(self):
        config = get_default_engine_config()
        for industry in INDUSTRIES:
            self.assertTrue(config.industry_profile(industry).keywords, industry)
        for level in LEVELS:
            self.assertTrue(config.level_profile(level).focus, level)
        for section in SECTION_NAMES:
            checks = config.section_checks(section)
            self.assertTrue(checks, section)
            self.assertEqual(sum(check.points for check in checks.values()), 100, section)

    def test_unknown_industry_and_level_raise(self):
        config = get_default_engine_config()
        with self.assertRaises(ValueError):
            config.industry_profile("astronomy")
        with self.assertRaises(ValueError):
            config.level_profile("principal")

    def test_invalid_category_reference_is_rejected(self):
        with self.assertRaises(RuntimeError):
            build_engine_config({"categories": {"languages": ["python"]}, "technical_categories": ["frameworks"]})


if __name__ == "__main__":
    unittest.main()
