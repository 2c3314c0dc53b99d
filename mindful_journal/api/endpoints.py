from fastapi import APIRouter

from mindful_journal.api.routes import analysis, auth, editor, entries, health, session
from mindful_journal.shared.errors import ERROR_RESPONSES


router = APIRouter()

router.include_router(health.router)
router.include_router(session.router, responses=ERROR_RESPONSES)
router.include_router(auth.router, responses=ERROR_RESPONSES)
router.include_router(entries.router, responses=ERROR_RESPONSES)
router.include_router(editor.router, responses=ERROR_RESPONSES)
router.include_router(analysis.router, responses=ERROR_RESPONSES)
