from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Iterable, Mapping, Union

from amanah.config import settings
from amanah.enums import Relation
from amanah.models import BeneficiaryInput, ValidationResult
from amanah.services.faraid.calculator import (
    HeirDescriptor,
    calculate_faraid_distribution,
    derive_context,
)

logger = logging.getLogger(__name__)

SHARE_TOTAL_TOLERANCE = float(settings.faraid.share_total_tolerance)
FIXED_SHARE_TOLERANCE = float(settings.faraid.fixed_share_tolerance)

ProposedShare = Union[BeneficiaryInput, Mapping[str, Any]]


def _relation_and_percentage(item: ProposedShare) -> tuple[Relation, float]:
    """Raises ValueError with a user-facing message for unusable records."""
    if isinstance(item, BeneficiaryInput):
        raw_relation, percentage = item.relation, item.share_percentage
    else:
        raw_relation = item.get("relation")
        percentage = item.get("share_percentage", item.get("sharePercentage"))
    if raw_relation is None:
        raise ValueError("Relation is required")
    try:
        relation = Relation(raw_relation)
    except ValueError:
        raise ValueError(f"Unknown relation: {raw_relation}") from None
    try:
        return relation, float(percentage or 0)
    except (TypeError, ValueError):
        raise ValueError("Share percentage must be a number") from None


def residuary_warning(relation: Relation) -> str:
    return (
        f"{relation.value} should receive residuary portion "
        "(remaining after fixed shares), not a fixed percentage"
    )


def validate_faraid_shares(beneficiaries: Iterable[ProposedShare]) -> ValidationResult:
    """Check a manually entered breakdown against the Faraid rules.

    The expected distribution is recomputed from the relations present in the
    proposal itself. A fixed-share relation held by several beneficiaries is
    expected to be split equally between them.
    """
    errors: list[str] = []
    warnings: list[str] = []

    proposed: list[tuple[Relation, float]] = []
    for index, item in enumerate(beneficiaries):
        try:
            proposed.append(_relation_and_percentage(item))
        except ValueError as exc:
            errors.append(f"Beneficiary at index {index}: {exc}")

    total = sum(percentage for _, percentage in proposed)
    if abs(total - 100) > SHARE_TOTAL_TOLERANCE:
        errors.append(f"Total shares must equal 100%. Current total: {total:.2f}%")

    counts = Counter(relation for relation, _ in proposed)
    heirs = [HeirDescriptor(relation=relation, count=count) for relation, count in counts.items()]
    distribution = calculate_faraid_distribution(heirs, derive_context(counts))

    for relation, percentage in proposed:
        expected_share = distribution.shares.get(relation)
        if expected_share is None or expected_share <= 0:
            continue
        expected_percentage = float(expected_share * 100 / counts[relation])
        if abs(percentage - expected_percentage) > FIXED_SHARE_TOLERANCE:
            errors.append(
                f"{relation.value}: Expected {expected_percentage:.2f}% per Faraid rules, "
                f"got {percentage:g}%"
            )

    for relation, _ in proposed:
        if relation in distribution.residuary:
            warnings.append(residuary_warning(relation))

    logger.debug(
        "Validated Faraid shares: beneficiaries=%d errors=%d warnings=%d",
        len(proposed),
        len(errors),
        len(warnings),
    )
    return ValidationResult.from_messages(errors, warnings)
