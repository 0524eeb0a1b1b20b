"""Agreement status state machine.

An agreement is created in DRAFT by its owner, collects the owner's and every
beneficiary's signature, is witnessed by an admin and only then becomes
ACTIVE. COMPLETED, CANCELLED and EXPIRED are terminal.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from amanah.enums import AgreementStatus, SignerType
from amanah.models import ValidationResult

StatusLike = Union[AgreementStatus, str]
ContextRecord = Mapping[str, Any]

ALLOWED_TRANSITIONS: Mapping[AgreementStatus, tuple[AgreementStatus, ...]] = MappingProxyType(
    {
        AgreementStatus.DRAFT: (AgreementStatus.PENDING_SIGNATURES, AgreementStatus.CANCELLED),
        AgreementStatus.PENDING_SIGNATURES: (
            AgreementStatus.DRAFT,
            AgreementStatus.PENDING_WITNESS,
            AgreementStatus.CANCELLED,
        ),
        AgreementStatus.PENDING_WITNESS: (
            AgreementStatus.PENDING_SIGNATURES,
            AgreementStatus.ACTIVE,
            AgreementStatus.CANCELLED,
        ),
        AgreementStatus.ACTIVE: (AgreementStatus.COMPLETED,),
        AgreementStatus.COMPLETED: (),
        AgreementStatus.CANCELLED: (),
        AgreementStatus.EXPIRED: (),
    }
)

TERMINAL_STATUSES: frozenset[AgreementStatus] = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)
CANCELLABLE_STATUSES: frozenset[AgreementStatus] = frozenset(
    {
        AgreementStatus.DRAFT,
        AgreementStatus.PENDING_SIGNATURES,
        AgreementStatus.PENDING_WITNESS,
    }
)
OWNER_SIGNING_STATUSES: frozenset[AgreementStatus] = frozenset(
    {AgreementStatus.DRAFT, AgreementStatus.PENDING_SIGNATURES}
)

STATUS_DESCRIPTIONS: Mapping[AgreementStatus, str] = MappingProxyType(
    {
        AgreementStatus.DRAFT: "Agreement is being created and can be edited",
        AgreementStatus.PENDING_SIGNATURES: "Owner has signed. Waiting for all beneficiaries to sign",
        AgreementStatus.PENDING_WITNESS: "All parties have signed. Waiting for admin witness",
        AgreementStatus.ACTIVE: "Agreement is fully executed and active",
        AgreementStatus.COMPLETED: "Asset distribution has been completed",
        AgreementStatus.CANCELLED: "Agreement has been cancelled",
        AgreementStatus.EXPIRED: "Agreement has expired",
    }
)


@dataclass(frozen=True, slots=True)
class TransitionContext:
    owner_has_signed: bool = False
    all_beneficiaries_signed: bool = False
    witnessed: bool = False


@dataclass(frozen=True, slots=True)
class SignatureContext:
    is_owner: bool = False
    is_beneficiary: bool = False
    is_admin: bool = False
    beneficiary_id: Optional[int] = None


@dataclass(frozen=True, slots=True)
class WorkflowState:
    status: AgreementStatus
    reason: str


@dataclass(frozen=True, slots=True)
class SignatureStep:
    label: str
    completed: bool


@dataclass(frozen=True, slots=True)
class SignatureProgress:
    total: int
    completed: int
    percentage: int
    steps: tuple[SignatureStep, ...]


@dataclass(frozen=True, slots=True)
class SigningPermissions:
    can_sign_as_owner: bool
    can_sign_as_beneficiary: bool
    can_witness: bool


def _status(value: StatusLike) -> AgreementStatus:
    return AgreementStatus(value)


def _flag(record: ContextRecord, snake: str, camel: str) -> bool:
    return bool(record.get(snake, record.get(camel, False)))


def _transition_context(
    context: Union[TransitionContext, ContextRecord, None],
) -> TransitionContext:
    if context is None:
        return TransitionContext()
    if isinstance(context, TransitionContext):
        return context
    return TransitionContext(
        owner_has_signed=_flag(context, "owner_has_signed", "ownerHasSigned"),
        all_beneficiaries_signed=_flag(
            context, "all_beneficiaries_signed", "allBeneficiariesSigned"
        ),
        witnessed=_flag(context, "witnessed", "witnessed"),
    )


def _signature_context(
    context: Union[SignatureContext, ContextRecord, None],
) -> SignatureContext:
    if context is None:
        return SignatureContext()
    if isinstance(context, SignatureContext):
        return context
    return SignatureContext(
        is_owner=_flag(context, "is_owner", "isOwner"),
        is_beneficiary=_flag(context, "is_beneficiary", "isBeneficiary"),
        is_admin=_flag(context, "is_admin", "isAdmin"),
        beneficiary_id=context.get("beneficiary_id", context.get("beneficiaryId")),
    )


def _values(statuses: tuple[AgreementStatus, ...]) -> str:
    return ", ".join(status.value for status in statuses) or "none"


def validate_status_transition(
    current_status: StatusLike,
    new_status: StatusLike,
    context: Union[TransitionContext, ContextRecord, None] = None,
) -> ValidationResult:
    """Check a status change against the transition table and its preconditions.

    Table membership and the signature/witness preconditions are independent
    checks; every violated rule is reported.
    """
    current = _status(current_status)
    target = _status(new_status)
    ctx = _transition_context(context)
    errors: list[str] = []

    allowed = ALLOWED_TRANSITIONS[current]
    if target not in allowed:
        errors.append(
            f"Cannot transition from {current.value} to {target.value}. "
            f"Allowed transitions: {_values(allowed)}"
        )

    if target is AgreementStatus.PENDING_SIGNATURES and not ctx.owner_has_signed:
        errors.append("Owner must sign before submitting for beneficiary signatures")
    elif target is AgreementStatus.PENDING_WITNESS and not ctx.all_beneficiaries_signed:
        errors.append("All beneficiaries must sign before submitting for witnessing")
    elif target is AgreementStatus.ACTIVE and not ctx.witnessed:
        errors.append("Agreement must be witnessed by an admin before becoming active")

    return ValidationResult.from_messages(errors)


def validate_signature(
    signer_type: Union[SignerType, str],
    agreement_status: StatusLike,
    context: Union[SignatureContext, ContextRecord, None] = None,
) -> ValidationResult:
    signer = SignerType(signer_type)
    status = _status(agreement_status)
    ctx = _signature_context(context)
    errors: list[str] = []

    if signer is SignerType.OWNER:
        if not ctx.is_owner:
            errors.append("Only the agreement owner can sign as owner")
        if status not in OWNER_SIGNING_STATUSES:
            errors.append(
                "Owner can only sign agreements in DRAFT or PENDING_SIGNATURES status. "
                f"Current status: {status.value}"
            )
    elif signer is SignerType.BENEFICIARY:
        if not ctx.is_beneficiary:
            errors.append("Only designated beneficiaries can sign as beneficiary")
        if status is not AgreementStatus.PENDING_SIGNATURES:
            errors.append(
                "Beneficiaries can only sign agreements in PENDING_SIGNATURES status. "
                f"Current status: {status.value}"
            )
    else:
        if not ctx.is_admin:
            errors.append("Only admins can witness agreements")
        if status is not AgreementStatus.PENDING_WITNESS:
            errors.append(
                "Agreements can only be witnessed in PENDING_WITNESS status. "
                f"Current status: {status.value}"
            )

    return ValidationResult.from_messages(errors)


def can_edit_agreement(status: StatusLike, user_id: object, owner_id: object) -> bool:
    return _status(status) is AgreementStatus.DRAFT and user_id == owner_id


def can_cancel_agreement(status: StatusLike) -> bool:
    return _status(status) in CANCELLABLE_STATUSES


def can_complete(status: StatusLike) -> bool:
    return _status(status) is AgreementStatus.ACTIVE


def get_next_valid_statuses(
    current_status: StatusLike,
    context: Union[TransitionContext, ContextRecord, None] = None,
) -> list[AgreementStatus]:
    current = _status(current_status)
    ctx = _transition_context(context)
    return [
        status
        for status in ALLOWED_TRANSITIONS[current]
        if validate_status_transition(current, status, ctx).valid
    ]


def get_workflow_status(
    context: Union[TransitionContext, ContextRecord, None] = None,
) -> WorkflowState:
    context = _transition_context(context)
    if not context.owner_has_signed:
        return WorkflowState(AgreementStatus.DRAFT, "Waiting for owner to sign")
    if not context.all_beneficiaries_signed:
        return WorkflowState(
            AgreementStatus.PENDING_SIGNATURES, "Waiting for all beneficiaries to sign"
        )
    if not context.witnessed:
        return WorkflowState(AgreementStatus.PENDING_WITNESS, "Waiting for admin witness")
    return WorkflowState(AgreementStatus.ACTIVE, "Agreement fully executed")


def get_signature_progress(
    total_beneficiaries: int,
    signed_beneficiaries: int,
    owner_has_signed: bool,
    witnessed: bool,
) -> SignatureProgress:
    # owner + beneficiaries + witness
    total = 2 + total_beneficiaries
    completed = int(owner_has_signed) + signed_beneficiaries + int(witnessed)
    steps = (
        SignatureStep("Owner Signature", owner_has_signed),
        SignatureStep("Beneficiary Signatures", signed_beneficiaries == total_beneficiaries),
        SignatureStep("Admin Witness", witnessed),
    )
    return SignatureProgress(
        total=total,
        completed=completed,
        percentage=round(completed / total * 100) if total > 0 else 0,
        steps=steps,
    )


def get_status_description(status: StatusLike) -> str:
    try:
        return STATUS_DESCRIPTIONS[_status(status)]
    except ValueError:
        return str(status)


def can_user_sign(
    user_id: object,
    owner_id: object,
    status: StatusLike,
    *,
    is_beneficiary: bool,
    is_admin: bool,
) -> SigningPermissions:
    current = _status(status)
    return SigningPermissions(
        can_sign_as_owner=user_id == owner_id and current in OWNER_SIGNING_STATUSES,
        can_sign_as_beneficiary=is_beneficiary and current is AgreementStatus.PENDING_SIGNATURES,
        can_witness=is_admin and current is AgreementStatus.PENDING_WITNESS,
    )
