"""Health check and credential status endpoints."""

from fastapi import APIRouter

from sanogen.credentials import credential_status

router = APIRouter()


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.get("/credential")
async def credential():
    """Whether an API key is configured, with the key masked."""
    return credential_status()
