from fastapi import Request

from mindful_journal.features.journal.controller import JournalController
from mindful_journal.shared.errors import ConfigurationError


def get_controller(request: Request) -> JournalController:
    """Provide the process-wide journal controller built at startup."""
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        raise ConfigurationError("Journal session is not initialized")
    return controller
