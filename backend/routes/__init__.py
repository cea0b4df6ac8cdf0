"""FastAPI API endpoints under /api.

Endpoint groups: settings (health, credential status) and tasks (analysis,
emotion, metaphor, enhance-prompt).
"""

from fastapi import APIRouter

from .settings import router as settings_router
from .tasks import router as tasks_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(tasks_router)
