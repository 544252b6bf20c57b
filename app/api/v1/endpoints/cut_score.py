"""
Cut Score endpoints.
"""

import datetime

from fastapi import APIRouter, Depends

from app.api.dependencies import get_as_of
from app.pwm.cut_score import compute_cut_score
from app.pwm.logs import assemble_cut_score_input
from app.schemas.cut_score import CutScoreFromLogsRequest, CutScoreInput, CutScoreResult

router = APIRouter()


@router.post(
    "",
    summary="Compute the Cut Score from pre-assembled inputs.",
    response_model=CutScoreResult,
)
def cut_score(data: CutScoreInput, as_of: datetime.datetime = Depends(get_as_of)):
    return compute_cut_score(data, as_of)


@router.post(
    "/from-logs",
    summary="Compute the Cut Score from a profile, weight logs and today's tracking.",
    response_model=CutScoreResult,
)
def cut_score_from_logs(request: CutScoreFromLogsRequest, as_of: datetime.datetime = Depends(get_as_of)):
    data = assemble_cut_score_input(request.profile, request.weight_logs, request.tracking, as_of)
    return compute_cut_score(data, as_of)
