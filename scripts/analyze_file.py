from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.schemas.analysis import INDUSTRIES, LEVELS  # noqa: E402
from app.services import analysis_service  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="Score a resume text file and write the analysis export JSON.")
    parser.add_argument("resume", help="Path to a plain-text resume")
    parser.add_argument("--job", default=None, help="Optional path to a plain-text job description")
    parser.add_argument("--job-title", default="", help="Job title used in recommendations")
    parser.add_argument("--company", default="", help="Company name used in recommendations")
    parser.add_argument("--industry", default="technology", choices=INDUSTRIES)
    parser.add_argument("--level", default="mid", choices=LEVELS)
    parser.add_argument(
        "--comprehensive",
        action="store_true",
        help="Use the weighted exact/partial matcher instead of the job analyzer.",
    )
    parser.add_argument("--out", default=None, help="Output JSON path (defaults to resume-analysis-<date>.json)")
    args = parser.parse_args()

    resume_text = Path(args.resume).read_text(encoding="utf-8")
    job_text = Path(args.job).read_text(encoding="utf-8") if args.job else ""

    analysis = analysis_service.analyze_resume(resume_text, args.industry, args.level)
    if job_text and args.comprehensive:
        analysis = analysis_service.analyze_comprehensive(
            analysis, job_text, args.job_title, args.company, args.industry, args.level
        )
    elif job_text:
        analysis = analysis_service.analyze_job(
            job_text, args.job_title, args.company, args.industry, args.level, analysis
        )

    document = analysis_service.build_export_payload(resume_text, job_text, analysis)
    out_path = Path(args.out or analysis_service.export_filename())
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(document, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    print(f"Wrote {out_path}")


if __name__ == "__main__":
    main()
