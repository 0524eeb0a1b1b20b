"""Faraid reference data.

The fixed-share table is descriptive: the calculator re-derives every share
from the surviving heirs because most of them are conditional (the mother's
share, for instance, depends on whether the deceased left children).
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from types import MappingProxyType
from typing import Iterable, Mapping, Protocol, TypeVar

from amanah.enums import Relation


@dataclass(frozen=True, slots=True)
class FixedShare:
    share: Fraction
    description: str


FIXED_SHARES: Mapping[Relation, FixedShare] = MappingProxyType(
    {
        # Quranic fixed shares
        Relation.FATHER: FixedShare(
            Fraction(1, 6), "1/6 fixed share, plus residuary if no male offspring"
        ),
        Relation.MOTHER: FixedShare(
            Fraction(1, 6), "1/6 if children/grandchildren, 1/3 if no children"
        ),
        Relation.HUSBAND: FixedShare(
            Fraction(1, 4), "1/4 with children, 1/2 without children"
        ),
        Relation.WIFE: FixedShare(
            Fraction(1, 8), "1/8 with children, 1/4 without children"
        ),
        Relation.DAUGHTER: FixedShare(
            Fraction(1, 2), "1/2 if single, 2/3 if multiple daughters"
        ),
        Relation.GRANDDAUGHTER: FixedShare(
            Fraction(1, 6), "1/6 when representing deceased daughter"
        ),
        Relation.GRANDMOTHER: FixedShare(Fraction(1, 6), "1/6 if no mother"),
        # Residuary only
        Relation.SON: FixedShare(
            Fraction(0), "Residuary only - receives remaining portion"
        ),
        Relation.GRANDSON: FixedShare(
            Fraction(0), "Residuary only - receives remaining portion"
        ),
        Relation.SIBLING: FixedShare(
            Fraction(0), "Residuary in absence of descendants/ancestors"
        ),
        Relation.GRANDFATHER: FixedShare(
            Fraction(0), "May receive fixed share or residuary"
        ),
        Relation.SPOUSE: FixedShare(
            Fraction(0),
            "Husband: 1/4 (with children) or 1/2 (without); "
            "Wife: 1/8 (with children) or 1/4 (without)",
        ),
        # Collateral relations
        Relation.UNCLE: FixedShare(
            Fraction(0), "Residuary in absence of closer relatives"
        ),
        Relation.AUNT: FixedShare(Fraction(0), "No fixed share in most schools"),
        Relation.NEPHEW: FixedShare(
            Fraction(0), "Residuary in absence of closer relatives"
        ),
        Relation.NIECE: FixedShare(Fraction(0), "Residuary in certain conditions"),
        Relation.COUSIN: FixedShare(Fraction(0), "Distant residuary heir"),
        Relation.OTHER: FixedShare(Fraction(0), "No prescribed share"),
    }
)

# Shown next to each heir in an automatically calculated distribution.
BENEFICIARY_DESCRIPTIONS: Mapping[Relation, str] = MappingProxyType(
    {
        Relation.FATHER: "Fixed share of 1/6, plus residuary if no male descendants",
        Relation.MOTHER: "1/6 if children present, 1/3 if no children",
        Relation.HUSBAND: "1/4 if children present, 1/2 if no children",
        Relation.WIFE: "1/8 if children present, 1/4 if no children",
        Relation.DAUGHTER: "1/2 if single, 2/3 shared among multiple daughters (with no sons)",
        Relation.GRANDDAUGHTER: "1/6 representing deceased daughter",
        Relation.SON: "Residuary - receives remaining portion",
        Relation.GRANDSON: "Residuary - in absence of sons",
        Relation.SIBLING: "Residuary - in absence of descendants, parents, and grandparents",
        Relation.GRANDFATHER: "May receive fixed share or residuary depending on circumstances",
        Relation.GRANDMOTHER: "1/6 in absence of mother",
        Relation.SPOUSE: "Share depends on gender of the surviving spouse",
        Relation.UNCLE: "Residuary - distant relative",
        Relation.AUNT: "No fixed share in most schools of thought",
        Relation.NEPHEW: "Residuary - distant relative",
        Relation.NIECE: "Residuary in certain conditions",
        Relation.COUSIN: "Distant residuary heir",
        Relation.OTHER: "No prescribed Faraid share",
    }
)

# Distant kin (and the gender-less SPOUSE) keep their descriptive entries
# above but are never computed automatically.
ELIGIBLE_HEIRS: frozenset[Relation] = frozenset(
    {
        Relation.FATHER,
        Relation.MOTHER,
        Relation.HUSBAND,
        Relation.WIFE,
        Relation.DAUGHTER,
        Relation.SON,
        Relation.GRANDDAUGHTER,
        Relation.GRANDSON,
        Relation.GRANDMOTHER,
        Relation.GRANDFATHER,
        Relation.SIBLING,
    }
)

DESCENDANTS: frozenset[Relation] = frozenset(
    {Relation.SON, Relation.DAUGHTER, Relation.GRANDSON, Relation.GRANDDAUGHTER}
)
MALE_DESCENDANTS: frozenset[Relation] = frozenset({Relation.SON, Relation.GRANDSON})
PARENTS: frozenset[Relation] = frozenset({Relation.FATHER, Relation.MOTHER})
SPOUSES: frozenset[Relation] = frozenset(
    {Relation.HUSBAND, Relation.WIFE, Relation.SPOUSE}
)


class HasRelation(Protocol):
    relation: Relation


MemberT = TypeVar("MemberT", bound=HasRelation)


def _lookup(relation: Relation | str) -> FixedShare | None:
    try:
        return FIXED_SHARES.get(Relation(relation))
    except ValueError:
        return None


def has_fixed_share(relation: Relation | str) -> bool:
    fixed = _lookup(relation)
    return bool(fixed and fixed.share > 0)


def get_faraid_explanation(relation: Relation | str) -> str:
    fixed = _lookup(relation)
    if fixed is None:
        return "No specific Faraid rule for this relation"
    return fixed.description


def get_beneficiary_description(relation: Relation) -> str:
    return BENEFICIARY_DESCRIPTIONS.get(
        relation, f"Share according to Faraid rules for {relation.value}"
    )


def filter_eligible_heirs(members: Iterable[MemberT]) -> list[MemberT]:
    return [member for member in members if member.relation in ELIGIBLE_HEIRS]
