"""Faraid distribution calculator.

Shares are kept as exact :class:`~fractions.Fraction` values all the way
through; percentages are only produced at the edge, for display and for the
per-beneficiary records handed to the agreement layer.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from amanah.config import settings
from amanah.enums import MemberType, Relation
from amanah.models import FamilyMember
from amanah.services.faraid.formatting import format_fraction, format_share
from amanah.services.faraid.rules import (
    DESCENDANTS,
    MALE_DESCENDANTS,
    PARENTS,
    SPOUSES,
    filter_eligible_heirs,
    get_beneficiary_description,
)

logger = logging.getLogger(__name__)

AUTO_TOTAL_TOLERANCE = float(settings.faraid.auto_total_tolerance)

NO_HEIRS_DESCRIPTION = "No valid Faraid heirs identified"
NO_ELIGIBLE_DESCRIPTION = "No eligible Faraid heirs found among family members"
NO_ELIGIBLE_WARNING = "No eligible family members for Faraid distribution"
RESIDUARY_DESCRIPTION = "Residuary share (remaining portion after fixed shares)"

# Registered and non-registered members are numbered independently.
MemberKey = tuple[MemberType, int]

# Relative claim of each residuary heir on the remainder.
RESIDUARY_UNITS: Mapping[Relation, int] = {
    Relation.SON: 2,
    Relation.DAUGHTER: 1,
    Relation.GRANDSON: 2,
    Relation.GRANDDAUGHTER: 1,
    Relation.SIBLING: 1,
    Relation.GRANDFATHER: 1,
}


@dataclass(frozen=True, slots=True)
class HeirDescriptor:
    relation: Relation
    count: int = 1


@dataclass(frozen=True, slots=True)
class FaraidContext:
    """Optional overrides; ``None`` means "derive from the heirs"."""

    has_children: Optional[bool] = None
    has_spouse: Optional[bool] = None
    has_parents: Optional[bool] = None
    is_male_descendant: Optional[bool] = None


@dataclass(frozen=True, slots=True)
class FaraidDistribution:
    shares: dict[Relation, Fraction]
    residuary: tuple[Relation, ...]
    total_fixed_shares: Fraction
    description: str
    awl_applied: bool = False

    @property
    def remaining_share(self) -> Fraction:
        return Fraction(1) - self.total_fixed_shares


@dataclass(frozen=True, slots=True)
class BeneficiaryWithShare:
    member_id: int
    type: MemberType
    name: str
    relation: Relation
    share: Fraction
    share_percentage: float
    share_formatted: str
    description: str

    @property
    def member_key(self) -> MemberKey:
        return self.type, self.member_id


@dataclass(frozen=True, slots=True)
class FaraidCalculationResult:
    beneficiaries: list[BeneficiaryWithShare]
    total_percentage: float
    description: str
    has_residuary: bool
    warnings: list[str] = field(default_factory=list)


HeirLike = Union[HeirDescriptor, Mapping[str, Any]]
MemberLike = Union[FamilyMember, Mapping[str, Any]]


def _coerce_heir(item: HeirLike) -> HeirDescriptor:
    if isinstance(item, HeirDescriptor):
        return item
    count = item.get("count")
    return HeirDescriptor(
        relation=Relation(item["relation"]),
        count=1 if count is None else int(count),
    )


def member_key(member: FamilyMember) -> MemberKey:
    return member.type, member.id


def _coerce_member(item: MemberLike) -> FamilyMember:
    if isinstance(item, FamilyMember):
        return item
    return FamilyMember.model_validate(item)


def count_relations(heirs: Iterable[HeirLike]) -> Counter[Relation]:
    counts: Counter[Relation] = Counter()
    for item in heirs:
        heir = _coerce_heir(item)
        if heir.count < 1:
            logger.debug("Skipping heir descriptor with count=%s", heir.count)
            continue
        counts[heir.relation] += heir.count
    return counts


def heirs_from_relations(relations: Iterable[Relation]) -> list[HeirDescriptor]:
    counts = Counter(Relation(relation) for relation in relations)
    return [HeirDescriptor(relation=relation, count=count) for relation, count in counts.items()]


def derive_context(counts: Mapping[Relation, int]) -> FaraidContext:
    present = {relation for relation, count in counts.items() if count > 0}
    return FaraidContext(
        has_children=bool(present & DESCENDANTS),
        has_spouse=bool(present & SPOUSES),
        has_parents=bool(present & PARENTS),
        is_male_descendant=bool(present & MALE_DESCENDANTS),
    )


def _resolve_context(
    counts: Mapping[Relation, int], context: Optional[FaraidContext]
) -> FaraidContext:
    derived = derive_context(counts)
    if context is None:
        return derived

    def pick(override: Optional[bool], fallback: Optional[bool]) -> bool:
        return bool(fallback) if override is None else override

    return FaraidContext(
        has_children=pick(context.has_children, derived.has_children),
        has_spouse=pick(context.has_spouse, derived.has_spouse),
        has_parents=pick(context.has_parents, derived.has_parents),
        is_male_descendant=pick(context.is_male_descendant, derived.is_male_descendant),
    )


def calculate_faraid_distribution(
    heirs: Iterable[HeirLike],
    context: Optional[FaraidContext] = None,
) -> FaraidDistribution:
    counts = count_relations(heirs)
    resolved = _resolve_context(counts, context)
    has_children = bool(resolved.has_children)
    has_parents = bool(resolved.has_parents)
    is_male_descendant = bool(resolved.is_male_descendant)
    children_label = "with children" if has_children else "without children"

    shares: dict[Relation, Fraction] = {}
    residuary: list[Relation] = []
    trace: list[str] = []

    if Relation.HUSBAND in counts:
        shares[Relation.HUSBAND] = Fraction(1, 4) if has_children else Fraction(1, 2)
        trace.append(f"Husband: {format_fraction(shares[Relation.HUSBAND])} ({children_label})")
    if Relation.WIFE in counts:
        shares[Relation.WIFE] = Fraction(1, 8) if has_children else Fraction(1, 4)
        trace.append(f"Wife: {format_fraction(shares[Relation.WIFE])} ({children_label})")
    if Relation.SPOUSE in counts:
        trace.append(
            "Spouse: share depends on gender - Husband: 1/4 (with children) or 1/2 (without); "
            "Wife: 1/8 (with children) or 1/4 (without)"
        )

    if Relation.FATHER in counts:
        shares[Relation.FATHER] = Fraction(1, 6)
        if not is_male_descendant:
            residuary.append(Relation.FATHER)
            trace.append("Father: 1/6 fixed + residuary")
        else:
            trace.append("Father: 1/6 fixed")

    if Relation.MOTHER in counts:
        shares[Relation.MOTHER] = Fraction(1, 6) if has_children else Fraction(1, 3)
        trace.append(f"Mother: {format_fraction(shares[Relation.MOTHER])} ({children_label})")
    elif Relation.GRANDMOTHER in counts:
        shares[Relation.GRANDMOTHER] = Fraction(1, 6)
        trace.append("Grandmother: 1/6 (in absence of mother)")

    has_sons = Relation.SON in counts
    if Relation.DAUGHTER in counts:
        daughters = counts[Relation.DAUGHTER]
        if has_sons:
            residuary.extend([Relation.DAUGHTER, Relation.SON])
            trace.append("Daughters and Sons: Residuary (son receives 2x daughter share)")
        elif daughters == 1:
            shares[Relation.DAUGHTER] = Fraction(1, 2)
            trace.append("Daughter: 1/2 (single daughter)")
        else:
            shares[Relation.DAUGHTER] = Fraction(2, 3)
            trace.append(f"Daughters: 2/3 total ({daughters} daughters)")

    if Relation.GRANDDAUGHTER in counts and Relation.DAUGHTER not in counts:
        shares[Relation.GRANDDAUGHTER] = Fraction(1, 6)
        trace.append("Granddaughter: 1/6 (representing deceased daughter)")

    if has_sons and Relation.SON not in residuary:
        residuary.append(Relation.SON)
        trace.append("Son: Residuary (remaining portion)")

    if Relation.GRANDSON in counts and not has_sons:
        residuary.append(Relation.GRANDSON)
        trace.append("Grandson: Residuary (in absence of son)")

    if (
        Relation.SIBLING in counts
        and not has_parents
        and not has_children
        and Relation.GRANDFATHER not in counts
    ):
        residuary.append(Relation.SIBLING)
        trace.append("Siblings: Residuary (absence of descendants/ascendants)")

    total_fixed = sum(shares.values(), Fraction(0))
    awl_applied = False
    if total_fixed > 1:
        # 'awl: every fixed share shrinks in proportion so the estate is not over-allocated.
        awl_applied = True
        scale = Fraction(1) / total_fixed
        shares = {relation: share * scale for relation, share in shares.items()}
        trace.append(
            f"Awl: fixed shares reduced proportionally (original total {format_fraction(total_fixed)})"
        )
        logger.info("Applied awl to fixed shares, original total=%s", total_fixed)
        total_fixed = sum(shares.values(), Fraction(0))

    return FaraidDistribution(
        shares=shares,
        residuary=tuple(residuary),
        total_fixed_shares=total_fixed,
        description="; ".join(trace) or NO_HEIRS_DESCRIPTION,
        awl_applied=awl_applied,
    )


def calculate_residuary_shares(
    residuary_heirs: Sequence[FamilyMember],
    remaining_share: Fraction,
) -> dict[MemberKey, Fraction]:
    """Split ``remaining_share`` among residuary heirs by unit weight.

    The result is keyed by ``(member.type, member.id)``.

    Sons and grandsons take two units against one for daughters and
    granddaughters; siblings and grandfathers take one unit each. This is a
    simplification of the classical rules (no full/half sibling distinction).
    Relations without a unit weight, such as FATHER, receive nothing here.
    """
    shares: dict[MemberKey, Fraction] = {}
    if remaining_share <= 0 or not residuary_heirs:
        return shares

    by_relation: dict[Relation, list[FamilyMember]] = {}
    for heir in residuary_heirs:
        by_relation.setdefault(heir.relation, []).append(heir)

    sons = by_relation.get(Relation.SON, [])
    daughters = by_relation.get(Relation.DAUGHTER, [])
    weighted: list[tuple[list[FamilyMember], int]] = [
        (sons, RESIDUARY_UNITS[Relation.SON]),
        (daughters, RESIDUARY_UNITS[Relation.DAUGHTER]),
    ]
    if not sons:
        weighted.append((by_relation.get(Relation.GRANDSON, []), RESIDUARY_UNITS[Relation.GRANDSON]))
    if not daughters:
        weighted.append(
            (by_relation.get(Relation.GRANDDAUGHTER, []), RESIDUARY_UNITS[Relation.GRANDDAUGHTER])
        )
    weighted.append((by_relation.get(Relation.SIBLING, []), RESIDUARY_UNITS[Relation.SIBLING]))
    weighted.append(
        (by_relation.get(Relation.GRANDFATHER, []), RESIDUARY_UNITS[Relation.GRANDFATHER])
    )

    total_units = sum(len(heirs) * units for heirs, units in weighted)
    if total_units == 0:
        logger.warning(
            "No weighted residuary heirs among %s, remainder %s left undistributed",
            [heir.relation.value for heir in residuary_heirs],
            remaining_share,
        )
        return shares

    share_per_unit = Fraction(remaining_share) / total_units
    for heirs, units in weighted:
        for heir in heirs:
            shares[member_key(heir)] = share_per_unit * units
    return shares


def calculate_auto_faraid_distribution(
    family_members: Iterable[MemberLike],
) -> FaraidCalculationResult:
    warnings: list[str] = []
    members = [_coerce_member(item) for item in family_members]
    eligible = filter_eligible_heirs(members)

    if not eligible:
        logger.warning("No eligible Faraid heirs among %d family members", len(members))
        return FaraidCalculationResult(
            beneficiaries=[],
            total_percentage=0.0,
            description=NO_ELIGIBLE_DESCRIPTION,
            has_residuary=False,
            warnings=[NO_ELIGIBLE_WARNING],
        )

    heirs_by_relation: dict[Relation, list[FamilyMember]] = {}
    for heir in eligible:
        heirs_by_relation.setdefault(heir.relation, []).append(heir)

    distribution = calculate_faraid_distribution(
        HeirDescriptor(relation=relation, count=len(heirs))
        for relation, heirs in heirs_by_relation.items()
    )

    beneficiaries: list[BeneficiaryWithShare] = []
    for relation, share in distribution.shares.items():
        heirs = heirs_by_relation.get(relation, [])
        if not heirs:
            continue
        share_per_heir = share / len(heirs)
        for heir in heirs:
            beneficiaries.append(
                BeneficiaryWithShare(
                    member_id=heir.id,
                    type=heir.type,
                    name=heir.name,
                    relation=heir.relation,
                    share=share_per_heir,
                    share_percentage=float(share_per_heir * 100),
                    share_formatted=format_share(share_per_heir),
                    description=get_beneficiary_description(relation),
                )
            )

    residuary_heirs: list[FamilyMember] = []
    for relation in distribution.residuary:
        residuary_heirs.extend(heirs_by_relation.get(relation, []))

    residuary_shares = calculate_residuary_shares(residuary_heirs, distribution.remaining_share)
    heirs_by_key = {member_key(heir): heir for heir in residuary_heirs}
    for key, share in residuary_shares.items():
        heir = heirs_by_key[key]
        beneficiaries.append(
            BeneficiaryWithShare(
                member_id=heir.id,
                type=heir.type,
                name=heir.name,
                relation=heir.relation,
                share=share,
                share_percentage=float(share * 100),
                share_formatted=format_share(share),
                description=RESIDUARY_DESCRIPTION,
            )
        )

    total_percentage = sum(item.share_percentage for item in beneficiaries)
    if abs(total_percentage - 100) > AUTO_TOTAL_TOLERANCE:
        warnings.append(
            f"Total shares ({total_percentage:.1f}%) may not equal 100% due to rounding. "
            "This is normal in Faraid calculations and the difference will be adjusted."
        )

    logger.debug(
        "Auto Faraid distribution: heirs=%d residuary=%d total=%.4f",
        len(beneficiaries),
        len(residuary_heirs),
        total_percentage,
    )
    return FaraidCalculationResult(
        beneficiaries=beneficiaries,
        total_percentage=round(total_percentage, 1),
        description=distribution.description,
        has_residuary=bool(residuary_heirs),
        warnings=warnings,
    )
