from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from app.core.rate_limit import rate_limit
from app.core.security import require_api_key
from app.schemas.analysis import ResumeAnalysis
from app.schemas.requests import (
    ComprehensiveRequest,
    ComprehensiveResponse,
    ExportRequest,
    JobAnalysisRequest,
    JobAnalysisResponse,
    ResumeAnalysisRequest,
    ResumeAnalysisResponse,
)
from app.services import analysis_service

router = APIRouter(dependencies=[Depends(require_api_key)])


def _unprocessable(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=422, detail=str(exc))


def _resume_for(payload: JobAnalysisRequest) -> ResumeAnalysis:
    if payload.resume_analysis is not None:
        return payload.resume_analysis
    return analysis_service.analyze_resume(payload.resume_text or "", payload.industry, payload.level)


@router.post("/resume/analyze", response_model=ResumeAnalysisResponse)
@rate_limit()
def analyze_resume(request: Request, payload: ResumeAnalysisRequest):
    _ = request
    try:
        analysis = analysis_service.analyze_resume(payload.resume_text, payload.industry, payload.level)
    except ValueError as exc:
        raise _unprocessable(exc) from exc
    outcome = analysis_service.persist_analysis(
        user_id=payload.user_id,
        kind="resume",
        industry=payload.industry,
        level=payload.level,
        analysis=analysis,
    )
    return ResumeAnalysisResponse(analysis=analysis, persisted=outcome.persisted, warnings=outcome.warnings)


@router.post("/job/analyze", response_model=JobAnalysisResponse)
@rate_limit()
def analyze_job(request: Request, payload: JobAnalysisRequest):
    _ = request
    try:
        analysis = analysis_service.analyze_job(
            payload.job_description,
            payload.job_title,
            payload.company,
            payload.industry,
            payload.level,
            _resume_for(payload),
        )
    except ValueError as exc:
        raise _unprocessable(exc) from exc
    outcome = analysis_service.persist_analysis(
        user_id=payload.user_id,
        kind="job",
        industry=payload.industry,
        level=payload.level,
        analysis=analysis,
        job_title=payload.job_title or None,
        company=payload.company or None,
    )
    return JobAnalysisResponse(analysis=analysis, persisted=outcome.persisted, warnings=outcome.warnings)


@router.post("/match/comprehensive", response_model=ComprehensiveResponse)
@rate_limit()
def comprehensive_match(request: Request, payload: ComprehensiveRequest):
    _ = request
    try:
        analysis = analysis_service.analyze_comprehensive(
            _resume_for(payload),
            payload.job_description,
            payload.job_title,
            payload.company,
            payload.industry,
            payload.level,
        )
    except ValueError as exc:
        raise _unprocessable(exc) from exc
    outcome = analysis_service.persist_analysis(
        user_id=payload.user_id,
        kind="comprehensive",
        industry=payload.industry,
        level=payload.level,
        analysis=analysis,
        job_title=payload.job_title or None,
        company=payload.company or None,
    )
    return ComprehensiveResponse(analysis=analysis, persisted=outcome.persisted, warnings=outcome.warnings)


@router.post("/resume/export")
@rate_limit()
def export_analysis(request: Request, payload: ExportRequest):
    _ = request
    analysis = payload.analysis
    if analysis is None:
        try:
            analysis = analysis_service.analyze_resume(payload.resume_text, payload.industry, payload.level)
        except ValueError as exc:
            raise _unprocessable(exc) from exc
    document = analysis_service.build_export_payload(payload.resume_text, payload.job_description, analysis)
    return JSONResponse(
        content=document,
        headers={"Content-Disposition": f'attachment; filename="{analysis_service.export_filename()}"'},
    )
