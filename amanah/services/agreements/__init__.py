"""Agreement validation and status workflow services."""

from .validation import (
    validate_agreement_input,
    validate_agreement_submission,
    validate_assets,
    validate_beneficiaries,
)
from .workflow import (
    ALLOWED_TRANSITIONS,
    SignatureContext,
    TransitionContext,
    can_cancel_agreement,
    can_complete,
    can_edit_agreement,
    can_user_sign,
    get_next_valid_statuses,
    get_signature_progress,
    get_status_description,
    get_workflow_status,
    validate_signature,
    validate_status_transition,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "SignatureContext",
    "TransitionContext",
    "can_cancel_agreement",
    "can_complete",
    "can_edit_agreement",
    "can_user_sign",
    "get_next_valid_statuses",
    "get_signature_progress",
    "get_status_description",
    "get_workflow_status",
    "validate_agreement_input",
    "validate_agreement_submission",
    "validate_assets",
    "validate_beneficiaries",
    "validate_signature",
    "validate_status_transition",
]
