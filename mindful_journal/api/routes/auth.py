"""
Auth API Routes

Sign in, sign up and sign out. Each returns the resulting session snapshot.
"""

import logging

from fastapi import APIRouter, Depends

from mindful_journal.api.dependencies import get_controller
from mindful_journal.api.models import LoginRequest, SessionResponse, SignupRequest
from mindful_journal.features.journal.controller import JournalController

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger("MindfulJournal.API.Auth")


@router.post("/login", response_model=SessionResponse)
async def login(
    request: LoginRequest,
    controller: JournalController = Depends(get_controller),
) -> SessionResponse:
    await controller.login(request.email, request.password)
    return SessionResponse.from_state(controller.state)


@router.post("/signup", response_model=SessionResponse)
async def signup(
    request: SignupRequest,
    controller: JournalController = Depends(get_controller),
) -> SessionResponse:
    await controller.signup(request.email, request.name, request.password)
    return SessionResponse.from_state(controller.state)


@router.post("/logout", response_model=SessionResponse)
async def logout(controller: JournalController = Depends(get_controller)) -> SessionResponse:
    await controller.logout()
    return SessionResponse.from_state(controller.state)
