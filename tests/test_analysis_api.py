import inspect
import sys
import tempfile
import unittest
from dataclasses import replace
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from app.history import db as history_db  # noqa: E402
from app.main import app  # noqa: E402
from engine_fixtures import SCENARIO_JOB, SCENARIO_RESUME  # noqa: E402


class AnalysisApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def test_storage_backed_endpoints_run_in_threadpool(self):
        paths = {"/v1/resume/analyze", "/v1/job/analyze", "/v1/match/comprehensive", "/v1/history", "/v1/history/stats"}
        endpoints = {route.path: route.endpoint for route in app.routes if getattr(route, "path", None) in paths}
        self.assertEqual(set(endpoints), paths)
        for path, endpoint in endpoints.items():
            self.assertFalse(inspect.iscoroutinefunction(endpoint), path)

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "healthy")
        self.assertIn("technology", body["industries"])
        self.assertEqual(body["levels"], ["entry", "mid", "senior"])

    def test_resume_analyze_scenario(self):
        response = self.client.post(
            "/v1/resume/analyze",
            json={"resumeText": SCENARIO_RESUME, "industry": "technology", "level": "mid"},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertFalse(body["persisted"])
        self.assertEqual(body["warnings"], [])
        analysis = body["analysis"]
        self.assertEqual(analysis["overallScore"], 69)
        self.assertEqual(analysis["sections"]["contact"]["score"], 75)
        self.assertEqual(analysis["keywords"], ["python", "leadership"])
        self.assertIn("missingKeywords", analysis)
        self.assertIn("tips", analysis["suggestions"][0])

    def test_blank_text_and_unknown_industry_are_rejected(self):
        blank = self.client.post("/v1/resume/analyze", json={"resumeText": "   "})
        self.assertEqual(blank.status_code, 422)
        unknown = self.client.post("/v1/resume/analyze", json={"resumeText": "Python", "industry": "astronomy"})
        self.assertEqual(unknown.status_code, 422)
        no_resume = self.client.post("/v1/job/analyze", json={"jobDescription": SCENARIO_JOB})
        self.assertEqual(no_resume.status_code, 422)

    def test_job_analyze_with_resume_text(self):
        response = self.client.post(
            "/v1/job/analyze",
            json={
                "jobDescription": SCENARIO_JOB,
                "jobTitle": "Platform Engineer",
                "company": "Acme",
                "resumeText": "Skills: Python, Docker",
            },
        )
        self.assertEqual(response.status_code, 200)
        analysis = response.json()["analysis"]
        self.assertEqual(analysis["requiredSkills"], ["python", "aws", "docker"])
        self.assertEqual(analysis["gaps"], ["aws", "kubernetes"])
        self.assertEqual(analysis["matchScore"], 47)
        self.assertIn("actionItems", analysis["recommendations"][0])

    def test_job_analyze_accepts_prior_resume_analysis(self):
        resume = self.client.post("/v1/resume/analyze", json={"resumeText": "Skills: Python, Docker"}).json()
        response = self.client.post(
            "/v1/job/analyze",
            json={"jobDescription": SCENARIO_JOB, "resumeAnalysis": resume["analysis"]},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["analysis"]["matchScore"], 47)

    def test_comprehensive_match(self):
        response = self.client.post(
            "/v1/match/comprehensive",
            json={"jobDescription": SCENARIO_JOB, "resumeText": "Skills: Python, Docker", "level": "senior"},
        )
        self.assertEqual(response.status_code, 200)
        analysis = response.json()["analysis"]
        self.assertEqual(analysis["matchScore"], 35)
        self.assertEqual(analysis["missingSkills"], ["aws", "kubernetes"])
        self.assertEqual(len(analysis["recommendations"]), 5)
        self.assertEqual(analysis["level"], "senior")
        self.assertIn("analysisDate", analysis)

    def test_export_download(self):
        response = self.client.post(
            "/v1/resume/export",
            json={"resumeText": SCENARIO_RESUME, "jobDescription": SCENARIO_JOB},
        )
        self.assertEqual(response.status_code, 200)
        disposition = response.headers["content-disposition"]
        self.assertTrue(disposition.startswith('attachment; filename="resume-analysis-'))
        self.assertTrue(disposition.endswith('.json"'))
        body = response.json()
        self.assertEqual(body["resumeContent"], SCENARIO_RESUME)
        self.assertEqual(body["jobDescription"], SCENARIO_JOB)
        self.assertEqual(body["analysis"]["overallScore"], 69)
        self.assertIn("timestamp", body)


class HistoryApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        enabled = replace(history_db.settings, history_enabled=True)
        self._patches = [
            patch.object(history_db, "_get_db_path", return_value=Path(self._tmp.name) / "history.db"),
            patch.object(history_db, "settings", enabled),
        ]
        for p in self._patches:
            p.start()

    def tearDown(self):
        for p in reversed(self._patches):
            p.stop()
        self._tmp.cleanup()

    def test_analyses_with_user_are_listed_and_summarized(self):
        saved = self.client.post("/v1/resume/analyze", json={"resumeText": SCENARIO_RESUME, "userId": "user-1"})
        self.assertTrue(saved.json()["persisted"])
        job = self.client.post(
            "/v1/job/analyze",
            json={"jobDescription": SCENARIO_JOB, "resumeText": "Skills: Python, Docker", "userId": "user-1"},
        )
        self.assertTrue(job.json()["persisted"])

        history = self.client.get("/v1/history", params={"user_id": "user-1", "limit": 10})
        self.assertEqual(history.status_code, 200)
        records = history.json()
        self.assertEqual([record["kind"] for record in records], ["job", "resume"])
        self.assertEqual(records[1]["matchScore"], 69)
        self.assertEqual(records[0]["analysis"]["matchScore"], 47)

        stats = self.client.get("/v1/history/stats", params={"user_id": "user-1"}).json()
        self.assertEqual(stats["totalAnalyses"], 2)
        self.assertEqual(stats["averageMatchScore"], 58.0)
        self.assertEqual(stats["bestMatchScore"], 69)

    def test_history_limit_validation(self):
        response = self.client.get("/v1/history", params={"user_id": "user-1", "limit": 500})
        self.assertEqual(response.status_code, 422)

    def test_persistence_failure_keeps_result(self):
        with patch.object(history_db, "save_analysis", side_effect=history_db.PersistenceFailure("disk full")):
            response = self.client.post(
                "/v1/resume/analyze", json={"resumeText": SCENARIO_RESUME, "userId": "user-1"}
            )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertFalse(body["persisted"])
        self.assertEqual(len(body["warnings"]), 1)
        self.assertEqual(body["analysis"]["overallScore"], 69)

    def test_unwritable_history_path_keeps_result(self):
        blocker = Path(self._tmp.name) / "blocker"
        blocker.write_text("", encoding="utf-8")
        with patch.object(history_db, "_get_db_path", return_value=blocker / "sub" / "history.db"):
            response = self.client.post(
                "/v1/job/analyze",
                json={"jobDescription": SCENARIO_JOB, "resumeText": "Skills: Python, Docker", "userId": "user-1"},
            )
            stats = self.client.get("/v1/history/stats", params={"user_id": "user-1"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertFalse(body["persisted"])
        self.assertEqual(body["warnings"], ["Analysis completed but could not be saved to your history."])
        self.assertEqual(body["analysis"]["matchScore"], 47)
        self.assertEqual(stats.status_code, 503)


if __name__ == "__main__":
    unittest.main()
