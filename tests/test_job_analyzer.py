import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.features.patterns import JobMatchRules, get_default_engine_config  # noqa: E402
from app.services.job_analyzer import (  # noqa: E402
    JobDescriptionAnalyzer,
    compute_match_score,
    extract_job_lines,
    find_gaps,
)
from app.services.resume_analyzer import ResumeAnalyzer  # noqa: E402
from engine_fixtures import SCENARIO_JOB  # noqa: E402

POSTING = """Senior Backend Engineer

Responsibilities:
- Design and build payment APIs
- Mentor junior engineers
- Own on-call rotation

Requirements:
- 5+ years of Python
- Experience with PostgreSQL and Redis
- Strong communication

Nice to have: Kafka, Terraform
"""


class JobDescriptionAnalyzerTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        config = get_default_engine_config()
        cls.resume_analyzer = ResumeAnalyzer(config)
        cls.analyzer = JobDescriptionAnalyzer(config)

    def _resume(self, text: str):
        return self.resume_analyzer.analyze(text, "technology", "mid")

    def test_required_and_preferred_scenario(self):
        resume = self._resume("Skills: Python, Docker")
        self.assertEqual(resume.keywords, ["python", "docker"])

        analysis = self.analyzer.analyze(SCENARIO_JOB, "Platform Engineer", "Acme", "technology", "mid", resume)
        self.assertEqual(analysis.required_skills, ["python", "aws", "docker"])
        self.assertEqual(analysis.preferred_skills, ["kubernetes"])
        self.assertEqual(analysis.gaps, ["aws", "kubernetes"])
        self.assertEqual(analysis.match_score, 47)
        self.assertEqual(analysis.job_title, "Platform Engineer")
        self.assertEqual(analysis.company, "Acme")
        self.assertEqual(analysis.recommendations[0].title, "Address Missing Skills")

    def test_section_headings_drive_line_classification(self):
        requirements, responsibilities = extract_job_lines(POSTING)
        self.assertEqual(
            requirements,
            ["5+ years of Python", "Experience with PostgreSQL and Redis", "Strong communication", "Nice to have: Kafka, Terraform"],
        )
        self.assertEqual(
            responsibilities,
            ["Design and build payment APIs", "Mentor junior engineers", "Own on-call rotation"],
        )

    def test_lines_without_headings_use_markers(self):
        text = "We are hiring.\nYou will manage vendor contracts.\n3 years experience required.\n- Travel occasionally"
        requirements, responsibilities = extract_job_lines(text)
        self.assertEqual(requirements, ["3 years experience required."])
        self.assertEqual(responsibilities, ["You will manage vendor contracts.", "Travel occasionally"])

    def test_line_lists_are_capped(self):
        text = "Requirements:\n" + "\n".join(f"- item {i}" for i in range(40))
        requirements, _ = extract_job_lines(text, max_lines=15)
        self.assertEqual(len(requirements), 15)

    def test_heading_blocks_feed_skill_extraction(self):
        resume = self._resume("Skills: Python, PostgreSQL, Kafka")
        analysis = self.analyzer.analyze(POSTING, "", "", "technology", "senior", resume)
        self.assertEqual(analysis.required_skills, ["python", "postgresql", "redis", "communication"])
        self.assertEqual(analysis.preferred_skills, ["terraform", "kafka"])
        self.assertEqual(analysis.gaps, ["redis", "communication", "terraform"])
        for skill in analysis.gaps:
            self.assertNotIn(skill, resume.keywords)

    def test_preferred_qualifications_heading_feeds_preferred_skills(self):
        resume = self._resume("Skills: Python, Kubernetes")
        posting = "Preferred Qualifications:\n- Kubernetes\n- Terraform\n\nRequired: Python."
        analysis = self.analyzer.analyze(posting, "", "", "technology", "mid", resume)
        self.assertEqual(analysis.required_skills, ["python"])
        self.assertEqual(analysis.preferred_skills, ["kubernetes", "terraform"])
        self.assertEqual(analysis.gaps, ["terraform"])
        self.assertEqual(analysis.match_score, 85)

    def test_preferred_subheading_inside_qualifications_block(self):
        resume = self._resume("Skills: Python")
        posting = "Qualifications:\n- Python\n- AWS\nPreferred:\n- Kubernetes\n"
        analysis = self.analyzer.analyze(posting, "", "", "technology", "mid", resume)
        self.assertEqual(analysis.required_skills, ["python", "aws"])
        self.assertEqual(analysis.preferred_skills, ["kubernetes"])
        self.assertEqual(analysis.gaps, ["aws", "kubernetes"])
        self.assertEqual(analysis.match_score, 35)

    def test_plus_inside_requirements_bullet_is_preferred(self):
        resume = self._resume("Skills: Python, AWS, Kubernetes")
        posting = "Requirements:\n- Python and AWS\n- Kubernetes experience is a plus\n"
        analysis = self.analyzer.analyze(posting, "", "", "technology", "mid", resume)
        self.assertEqual(analysis.required_skills, ["python", "aws"])
        self.assertEqual(analysis.preferred_skills, ["kubernetes"])
        self.assertEqual(analysis.gaps, [])
        self.assertEqual(analysis.match_score, 100)

    def test_posting_without_anchors_treats_all_skills_as_required(self):
        resume = self._resume("Skills: Java")
        analysis = self.analyzer.analyze("Join us to ship React and TypeScript apps.", "", "", "technology", "mid", resume)
        self.assertEqual(analysis.required_skills, ["typescript", "react"])
        self.assertEqual(analysis.preferred_skills, [])
        self.assertEqual(analysis.match_score, 0)

    def test_empty_posting(self):
        resume = self._resume("Skills: Python")
        analysis = self.analyzer.analyze("", "", "", "technology", "mid", resume)
        self.assertEqual(analysis.required_skills, [])
        self.assertEqual(analysis.gaps, [])
        self.assertEqual(analysis.requirements, [])
        self.assertGreaterEqual(analysis.match_score, 0)


class MatchScoreTests(unittest.TestCase):
    def setUp(self):
        self.rules = JobMatchRules()

    def test_score_is_monotonic_in_overlap(self):
        required = ["python", "aws", "docker", "terraform"]
        preferred = ["kubernetes", "kafka"]
        previous = -1
        covered: list[str] = []
        for skill in [*required, *preferred]:
            covered.append(skill)
            score = compute_match_score(required, preferred, covered, self.rules)
            self.assertGreaterEqual(score, previous)
            previous = score
        self.assertEqual(previous, 100)

    def test_surplus_keywords_earn_capped_bonus(self):
        resume = ["python"] + [f"skill{i}" for i in range(40)]
        self.assertEqual(compute_match_score(["python"], [], resume, self.rules), 80)
        self.assertEqual(compute_match_score(["python"], [], ["python", "django", "flask"], self.rules), 71)

    def test_substring_overlap_counts_as_match(self):
        self.assertEqual(compute_match_score(["react"], [], ["react native"], self.rules), 70)

    def test_gaps_preserve_order_and_skip_matches(self):
        gaps = find_gaps(["python", "aws", "go"], ["aws", "kafka"], ["python", "golang"])
        self.assertEqual(gaps, ["aws", "kafka"])


if __name__ == "__main__":
    unittest.main()
