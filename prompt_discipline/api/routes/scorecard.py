"""
Scorecard and baseline API routes
"""

import logging
from pathlib import Path
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from prompt_discipline.core.baseline import BaselineStore
from prompt_discipline.core.scorecard_service import ScorecardRequest, ScorecardService

router = APIRouter()
logger = logging.getLogger(__name__)


class ScorecardRequestBody(BaseModel):
    project: Optional[str] = None
    period: Literal["session", "day", "week", "month"] = "day"
    sessionId: Optional[str] = None
    since: Optional[str] = None
    output: Literal["markdown", "pdf", "html"] = "markdown"
    outputPath: Optional[str] = None
    reportType: Literal["scorecard", "trend", "comparative"] = "scorecard"
    compareProjects: list[str] = []
    projectPath: Optional[str] = None


class CategoryScoreResponse(BaseModel):
    name: str
    score: int
    grade: str
    evidence: str


class ScorecardResponse(BaseModel):
    """Rendered report; scores are included when a single scorecard was built."""

    kind: str
    text: str
    pdfPath: Optional[str] = None
    overall: Optional[int] = None
    overallGrade: Optional[str] = None
    categories: list[CategoryScoreResponse] = []


class BaselineResponse(BaseModel):
    project: str
    categoryAverages: dict[str, int]
    overallAverage: int
    sessionCount: int
    lastUpdated: str


def get_scorecard_service(project_path: Optional[str] = None) -> ScorecardService:
    project_dir = Path(project_path) if project_path else None
    return ScorecardService(project_dir=project_dir)


@router.post("/scorecard", response_model=ScorecardResponse)
def generate_scorecard(body: ScorecardRequestBody) -> ScorecardResponse:
    """Generate a scorecard, trend or comparative report."""
    if body.projectPath and not Path(body.projectPath).is_dir():
        raise HTTPException(status_code=404, detail="Project path not found")

    service = get_scorecard_service(body.projectPath)
    result = service.generate(
        ScorecardRequest(
            project=body.project,
            period=body.period,
            session_id=body.sessionId,
            since=body.since,
            output=body.output,
            output_path=body.outputPath,
            report_type=body.reportType,
            compare_projects=list(body.compareProjects),
        )
    )

    response = ScorecardResponse(kind=result.kind, text=result.text, pdfPath=result.pdf_path)
    if result.scorecard:
        response.overall = result.scorecard.overall
        response.overallGrade = result.scorecard.overall_grade
        response.categories = [
            CategoryScoreResponse(name=c.name, score=c.score, grade=c.grade, evidence=c.evidence)
            for c in result.scorecard.categories
        ]
    return response


@router.get("/baseline/{project}", response_model=BaselineResponse)
def get_baseline(project: str) -> BaselineResponse:
    """Return the lifetime baseline recorded for a project."""
    baseline = BaselineStore().load(project)
    if baseline is None:
        raise HTTPException(status_code=404, detail="No baseline recorded for project")
    return BaselineResponse(project=project, **baseline.to_dict())
