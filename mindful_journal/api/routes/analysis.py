"""
Analysis API Routes

AI reflection on the editor's content. The result is returned for the
editor to attach to its draft; nothing is persisted until the entry is saved.
"""

from fastapi import APIRouter, Depends

from mindful_journal.api.dependencies import get_controller
from mindful_journal.api.models import AnalyzeRequest
from mindful_journal.features.journal.controller import JournalController
from mindful_journal.features.journal.models import Analysis

router = APIRouter(tags=["Analysis"])


@router.post("/analysis", response_model=Analysis)
async def analyze_draft(
    request: AnalyzeRequest,
    controller: JournalController = Depends(get_controller),
) -> Analysis:
    return await controller.analyze_draft(request.content)
