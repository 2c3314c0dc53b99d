from fastapi import APIRouter, Request

from mindful_journal.core.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(request: Request):
    """Liveness plus the phase of the journal session, if one was built."""
    controller = getattr(request.app.state, "controller", None)
    phase = controller.state.phase.value if controller is not None else None
    return {
        "status": "healthy",
        "service": settings.SERVICE_NAME,
        "session_phase": phase,
    }
