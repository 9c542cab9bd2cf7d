"""
Prompt triage API routes
"""

import logging
from pathlib import Path
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from prompt_discipline.core.config import PreflightConfig, load_config
from prompt_discipline.core.triage import triage

router = APIRouter()
logger = logging.getLogger(__name__)


class TriageRequest(BaseModel):
    """A prompt to classify, optionally in the context of a project."""

    prompt: str = Field(min_length=1)
    projectPath: Optional[str] = None
    strictness: Optional[Literal["relaxed", "standard", "strict"]] = None


class TriageResponse(BaseModel):
    level: str
    confidence: float
    reasons: list[str]
    recommendedTools: list[str]
    crossServiceHits: list[str] | None = None


@router.post("/triage", response_model=TriageResponse)
def triage_prompt(request: TriageRequest) -> TriageResponse:
    """Classify a prompt and recommend clarification tools."""
    if request.projectPath:
        project_dir = Path(request.projectPath)
        if not project_dir.is_dir():
            raise HTTPException(status_code=404, detail="Project path not found")
        config = load_config(project_dir).triage_config()
    else:
        config = PreflightConfig().triage_config()

    if request.strictness:
        config.strictness = request.strictness

    result = triage(request.prompt, config)
    logger.debug("Triaged prompt as %s (%.2f)", result.level, result.confidence)
    return TriageResponse(
        level=result.level,
        confidence=result.confidence,
        reasons=result.reasons,
        recommendedTools=result.recommended_tools,
        crossServiceHits=result.cross_service_hits,
    )
