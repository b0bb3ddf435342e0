"""Application services."""

from .forms import FormSession, FormSessionService, get_form_session_service, reset_form_sessions
from .new_bill import NewBillController

__all__ = [
    "FormSession",
    "FormSessionService",
    "NewBillController",
    "get_form_session_service",
    "reset_form_sessions",
]
