from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...components.matching.chain import MatchingProviderChain, build_default_chain
from ...components.matching.repository import serialize_match_run
from ...components.matching.service import MatchService
from ...platform.database import get_db
from ...schemas.matching import MatchRequest

router = APIRouter(prefix="/ai-job", tags=["AI Job Matching"])


def get_matching_chain() -> MatchingProviderChain:
    return build_default_chain()


def get_match_service(
    db: Session = Depends(get_db),
    chain: MatchingProviderChain = Depends(get_matching_chain),
) -> MatchService:
    return MatchService(db, chain)


@router.post("/match")
def create_match(
    data: MatchRequest,
    service: MatchService = Depends(get_match_service),
):
    result = service.run_match(data.user_id)
    return result.to_payload()


@router.get("/user/{user_id}/matches")
def list_user_matches(
    user_id: str,
    limit: int = Query(default=10, ge=1, le=50),
    service: MatchService = Depends(get_match_service),
):
    runs = service.match_history(user_id, limit)
    return {"matchRuns": [serialize_match_run(run) for run in runs]}


@router.get("/match/{match_id}")
def get_match(
    match_id: str,
    service: MatchService = Depends(get_match_service),
):
    return serialize_match_run(service.get_run(match_id))
