from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from amanah.config import settings
from amanah.enums import DistributionType
from amanah.models import AssetInput, BeneficiaryInput, ValidationResult
from amanah.services.faraid.validator import validate_faraid_shares

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = int(settings.agreements.title_max_length)
DESCRIPTION_MAX_LENGTH = int(settings.agreements.description_max_length)
SHARE_TOTAL_TOLERANCE = float(settings.agreements.share_total_tolerance)

DateLike = Union[date, datetime, str, None]
BeneficiaryLike = Union[BeneficiaryInput, Mapping[str, Any]]
AssetLike = Union[AssetInput, Mapping[str, Any]]


def _parse_date(value: DateLike) -> Optional[datetime]:
    """Normalise to a naive UTC datetime; raises ValueError on garbage."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _distribution_type_values() -> list[str]:
    return [item.value for item in DistributionType]


def validate_agreement_input(
    title: Optional[str],
    description: Optional[str] = None,
    distribution_type: Union[DistributionType, str, None] = None,
    effective_date: DateLike = None,
    expiry_date: DateLike = None,
    *,
    now: Optional[datetime] = None,
) -> ValidationResult:
    errors: list[str] = []
    warnings: list[str] = []

    if not title or not title.strip():
        errors.append("Title is required")
    elif len(title) > TITLE_MAX_LENGTH:
        errors.append(f"Title must be less than {TITLE_MAX_LENGTH} characters")

    if description and len(description) > DESCRIPTION_MAX_LENGTH:
        errors.append(f"Description must be less than {DESCRIPTION_MAX_LENGTH} characters")

    if distribution_type and distribution_type not in _distribution_type_values():
        errors.append(
            f"Invalid distribution type. Must be one of: {', '.join(_distribution_type_values())}"
        )

    effective: Optional[datetime] = None
    expiry: Optional[datetime] = None
    try:
        effective = _parse_date(effective_date)
    except ValueError:
        errors.append("Effective date is not a valid date")
    try:
        expiry = _parse_date(expiry_date)
    except ValueError:
        errors.append("Expiry date is not a valid date")

    if effective is not None and expiry is not None and expiry <= effective:
        errors.append("Expiry date must be after effective date")

    if effective is not None:
        reference = _parse_date(now) if now is not None else datetime.now(timezone.utc).replace(tzinfo=None)
        if effective < reference:
            warnings.append("Effective date is in the past")

    return ValidationResult.from_messages(errors, warnings)


def _coerce_beneficiary(item: BeneficiaryLike) -> BeneficiaryInput:
    if isinstance(item, BeneficiaryInput):
        return item
    return BeneficiaryInput.model_validate(item)


def _coerce_asset(item: AssetLike) -> AssetInput:
    if isinstance(item, AssetInput):
        return item
    return AssetInput.model_validate(item)


def _first_error(exc: ValidationError) -> str:
    details = exc.errors()
    if not details:
        return "invalid record"
    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


def validate_beneficiaries(
    beneficiaries: Sequence[BeneficiaryLike],
    distribution_type: Union[DistributionType, str, None],
) -> ValidationResult:
    errors: list[str] = []
    warnings: list[str] = []

    if not beneficiaries:
        errors.append("At least one beneficiary is required")
        return ValidationResult.from_messages(errors, warnings)

    parsed: list[BeneficiaryInput] = []
    for index, item in enumerate(beneficiaries):
        try:
            beneficiary = _coerce_beneficiary(item)
        except ValidationError as exc:
            errors.append(f"Beneficiary at index {index}: {_first_error(exc)}")
            continue
        parsed.append(beneficiary)

        has_registered = beneficiary.family_member_id is not None
        has_non_registered = beneficiary.non_registered_family_member_id is not None
        if not has_registered and not has_non_registered:
            errors.append(
                f"Beneficiary at index {index}: Must specify either a registered family member "
                "or non-registered member"
            )
        if has_registered and has_non_registered:
            errors.append(
                f"Beneficiary at index {index}: Cannot specify both registered and non-registered member"
            )

        share = beneficiary.share_percentage
        if share is None or share <= 0:
            errors.append(f"Beneficiary at index {index}: Share percentage must be a positive number")
        elif share > 100:
            errors.append(f"Beneficiary at index {index}: Share percentage cannot exceed 100%")

        if beneficiary.relation is None:
            errors.append(f"Beneficiary at index {index}: Relation is required")

    total = sum(item.share_percentage or 0 for item in parsed)
    if abs(total - 100) > SHARE_TOTAL_TOLERANCE:
        errors.append(f"Total beneficiary shares must equal 100%. Current total: {total:.2f}%")

    if distribution_type == DistributionType.FARAID:
        faraid = validate_faraid_shares([item for item in parsed if item.relation is not None])
        errors.extend(faraid.errors)
        warnings.extend(faraid.warnings)

    return ValidationResult.from_messages(errors, warnings)


def validate_assets(assets: Sequence[AssetLike]) -> ValidationResult:
    errors: list[str] = []
    warnings: list[str] = []

    if not assets:
        errors.append("At least one asset is required")
        return ValidationResult.from_messages(errors, warnings)

    asset_ids: list[int] = []
    for index, item in enumerate(assets):
        try:
            asset = _coerce_asset(item)
        except ValidationError as exc:
            errors.append(f"Asset at index {index}: {_first_error(exc)}")
            continue

        if asset.asset_id is None:
            errors.append(f"Asset at index {index}: Asset ID is required")
        else:
            asset_ids.append(asset.asset_id)

        if asset.allocated_value is not None and asset.allocated_value < 0:
            errors.append(f"Asset at index {index}: Allocated value cannot be negative")

        if asset.allocated_percentage is not None and not 0 <= asset.allocated_percentage <= 100:
            errors.append(f"Asset at index {index}: Allocated percentage must be between 0 and 100")

    if len(asset_ids) != len(set(asset_ids)):
        errors.append("Duplicate assets detected. Each asset can only be added once")

    return ValidationResult.from_messages(errors, warnings)


def validate_agreement_submission(
    *,
    title: Optional[str],
    distribution_type: Union[DistributionType, str, None],
    beneficiaries: Sequence[BeneficiaryLike],
    assets: Sequence[AssetLike],
    description: Optional[str] = None,
    effective_date: DateLike = None,
    expiry_date: DateLike = None,
    now: Optional[datetime] = None,
) -> ValidationResult:
    """Run every agreement validator and collect all of their messages."""
    result = validate_agreement_input(
        title,
        description,
        distribution_type,
        effective_date,
        expiry_date,
        now=now,
    ).merge(
        validate_beneficiaries(beneficiaries, distribution_type),
        validate_assets(assets),
    )
    if not result.valid:
        logger.info("Agreement submission rejected with %d errors", len(result.errors))
    return result
