"""API router for sweeping listing markup."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from api.routers.credentials import get_store
from models.domain import SweepStatus
from models.schemas import SweepRequest, SweepResponse
from services.credential_store import CredentialStore
from services.sweep_pipeline import ListingSweeper, build_sweeper, sweep_html

logger = logging.getLogger(__name__)

router = APIRouter()


def get_sweeper(store: CredentialStore = Depends(get_store)) -> ListingSweeper:
    return build_sweeper(store)


@router.post("/sweep", response_model=SweepResponse)
async def sweep_listings(
    request: SweepRequest,
    sweeper: ListingSweeper = Depends(get_sweeper),
) -> SweepResponse:
    """
    Remove listings whose brand Gemini classifies as delete.

    There is nobody to prompt for a key here, so a missing key is a 400.
    A failed classification leaves the markup untouched and returns 502.
    """
    swept_html, result = await sweep_html(request.html, sweeper)

    if result.status == SweepStatus.NO_CREDENTIAL:
        raise HTTPException(
            status_code=400,
            detail="No Gemini API key stored. PUT one to /api/v1/credentials/gemini first.",
        )
    if result.status == SweepStatus.FAILED:
        raise HTTPException(status_code=502, detail=f"Sweep failed: {result.error}")

    logger.info(f"Sweep {result.status.value}: removed {len(result.removed)} listings")
    return SweepResponse(
        status=result.status,
        html=swept_html,
        brands=result.brands,
        decisions=result.decisions,
        removed=result.removed,
        error=result.error,
    )
