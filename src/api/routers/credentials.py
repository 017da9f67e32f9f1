"""API router for the stored Gemini API key."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from models import get_db
from models.schemas import CredentialStatus, CredentialUpdate
from services.credential_store import CredentialStore, get_credential_store
from services.errors import StorageError

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(db: Session = Depends(get_db)) -> CredentialStore:
    return get_credential_store(db)


def _status(store: CredentialStore) -> CredentialStatus:
    entry = store.entry()
    if entry is None:
        return CredentialStatus(configured=False)
    return CredentialStatus(
        configured=True,
        is_encrypted=entry.is_encrypted,
        updated_at=entry.updated_at,
    )


@router.get("/credentials/gemini", response_model=CredentialStatus)
async def get_gemini_credential(
    store: CredentialStore = Depends(get_store),
) -> CredentialStatus:
    """
    Report whether a Gemini API key is stored.

    The key itself is never returned.
    """
    try:
        return _status(store)
    except StorageError as e:
        logger.error(f"Failed to read Gemini credential: {e}")
        raise HTTPException(status_code=500, detail="Failed to read stored credential")


@router.put("/credentials/gemini", response_model=CredentialStatus)
async def put_gemini_credential(
    credential: CredentialUpdate,
    store: CredentialStore = Depends(get_store),
) -> CredentialStatus:
    """
    Store the Gemini API key, replacing any previous one.

    The key is encrypted first when ENCRYPTION_SECRET_KEY is configured.
    """
    api_key = credential.api_key.strip()
    if not api_key:
        raise HTTPException(status_code=422, detail="API key must not be blank")

    try:
        store.set(api_key)
        return _status(store)
    except StorageError as e:
        logger.error(f"Failed to store Gemini credential: {e}")
        raise HTTPException(status_code=500, detail="Failed to store credential")


@router.delete("/credentials/gemini", status_code=204)
async def delete_gemini_credential(
    store: CredentialStore = Depends(get_store),
) -> None:
    try:
        removed = store.clear()
    except StorageError as e:
        logger.error(f"Failed to delete Gemini credential: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete credential")

    if not removed:
        raise HTTPException(status_code=404, detail="No Gemini API key stored")
