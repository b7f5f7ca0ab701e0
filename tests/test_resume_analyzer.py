import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.features.patterns import build_engine_config, get_default_engine_config  # noqa: E402
from app.schemas.analysis import ResumeAnalysis  # noqa: E402
from app.services.resume_analyzer import ResumeAnalyzer  # noqa: E402
from engine_fixtures import SCENARIO_RESUME  # noqa: E402

TECH_KEYWORDS = [
    "software development",
    "agile",
    "cloud computing",
    "api",
    "microservices",
    "devops",
    "machine learning",
    "algorithms",
    "system design",
    "testing",
    "scalability",
    "security",
]


class ResumeAnalyzerTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.analyzer = ResumeAnalyzer(get_default_engine_config())

    def test_scenario_resume(self):
        analysis = self.analyzer.analyze(SCENARIO_RESUME, "technology", "mid")
        self.assertEqual(analysis.sections.contact.score, 75)
        self.assertGreaterEqual(analysis.sections.experience.score, 95)
        self.assertEqual(analysis.keywords, ["python", "leadership"])
        self.assertEqual(analysis.missing_keywords, TECH_KEYWORDS)
        self.assertEqual(analysis.overall_score, 69)
        self.assertEqual(analysis.ats_score, 50)
        self.assertEqual(analysis.word_count, 26)
        self.assertEqual(analysis.estimated_reading_time, 1)
        self.assertEqual(
            [s.category for s in analysis.suggestions],
            ["keywords", "achievements", "keywords", "education", "positioning"],
        )

    def test_empty_resume(self):
        analysis = self.analyzer.analyze("", "technology", "entry")
        self.assertEqual(analysis.overall_score, 0)
        for section in analysis.sections.as_dict().values():
            self.assertEqual(section.score, 0)
        self.assertIn(analysis.word_count, (0, 1))
        self.assertEqual(analysis.estimated_reading_time, 0)
        self.assertEqual(analysis.readability_score, 0)
        self.assertEqual(analysis.keywords, [])
        self.assertEqual(analysis.ats_score, 10)

    def test_analysis_is_deterministic(self):
        first = self.analyzer.analyze(SCENARIO_RESUME, "consulting", "senior")
        second = self.analyzer.analyze(SCENARIO_RESUME, "consulting", "senior")
        self.assertEqual(first, second)

    def test_keyword_set_properties(self):
        text = (
            "Agile team lead. Python, python, PYTHON and Docker on AWS. "
            "Built microservices and owned system design reviews with strong communication."
        )
        config = get_default_engine_config()
        for industry in config.industries:
            analysis = self.analyzer.analyze(text, industry, "mid")
            keywords = analysis.keywords
            self.assertEqual(len(keywords), len({k.lower() for k in keywords}))
            self.assertFalse(set(analysis.missing_keywords) & set(keywords))
            expected_missing = [
                term for term in config.industry_profile(industry).keywords if term not in set(keywords)
            ]
            self.assertEqual(analysis.missing_keywords, expected_missing)

    def test_scores_are_bounded_ints(self):
        analysis = self.analyzer.analyze(SCENARIO_RESUME * 50, "technology", "senior")
        for value in (analysis.overall_score, analysis.ats_score, analysis.readability_score):
            self.assertIsInstance(value, int)
            self.assertGreaterEqual(value, 0)
            self.assertLessEqual(value, 100)
        self.assertEqual(analysis.estimated_reading_time, 7)

    def test_json_export_round_trips(self):
        analysis = self.analyzer.analyze(SCENARIO_RESUME, "technology", "mid")
        payload = analysis.model_dump(mode="json", by_alias=True)
        self.assertIn("overallScore", payload)
        self.assertIn("missingKeywords", payload)
        self.assertIn("estimatedReadingTime", payload)
        self.assertEqual(ResumeAnalysis.model_validate(payload), analysis)

    def test_small_substitute_config(self):
        config = build_engine_config(
            {
                "categories": {"languages": ["python", "go"]},
                "technical_categories": ["languages"],
                "industries": {"technology": {"label": "Technology", "keywords": ["python", "rust"]}},
                "levels": {"mid": {"label": "Mid Level", "focus": "delivery"}},
            }
        )
        analysis = ResumeAnalyzer(config).analyze("Python and Go services", "technology", "mid")
        self.assertEqual(analysis.keywords, ["python", "go"])
        self.assertEqual(analysis.missing_keywords, ["rust"])
        self.assertEqual(analysis.overall_score, 0)


if __name__ == "__main__":
    unittest.main()
