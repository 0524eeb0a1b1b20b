from __future__ import annotations

from fractions import Fraction

import pytest

from amanah.enums import MemberType, Relation
from amanah.models import FamilyMember
from amanah.services.faraid.rules import (
    ELIGIBLE_HEIRS,
    FIXED_SHARES,
    filter_eligible_heirs,
    get_faraid_explanation,
    has_fixed_share,
)


def _member(member_id: int, relation: Relation) -> FamilyMember:
    return FamilyMember(
        id=member_id,
        type=MemberType.REGISTERED,
        name=f"Member {member_id}",
        relation=relation,
    )


def test_fixed_share_table_values() -> None:
    assert FIXED_SHARES[Relation.FATHER].share == Fraction(1, 6)
    assert FIXED_SHARES[Relation.HUSBAND].share == Fraction(1, 4)
    assert FIXED_SHARES[Relation.WIFE].share == Fraction(1, 8)
    assert FIXED_SHARES[Relation.DAUGHTER].share == Fraction(1, 2)
    assert FIXED_SHARES[Relation.SON].share == 0
    assert set(FIXED_SHARES) == set(Relation)


def test_fixed_share_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        FIXED_SHARES[Relation.SON] = FIXED_SHARES[Relation.FATHER]  # type: ignore[index]


def test_recognizes_fixed_share_relations() -> None:
    assert has_fixed_share(Relation.HUSBAND) is True
    assert has_fixed_share("GRANDMOTHER") is True
    assert has_fixed_share(Relation.SON) is False
    assert has_fixed_share(Relation.UNCLE) is False
    assert has_fixed_share("STEPSON") is False


def test_explanations() -> None:
    assert get_faraid_explanation(Relation.GRANDMOTHER) == "1/6 if no mother"
    assert get_faraid_explanation("UNKNOWN") == "No specific Faraid rule for this relation"


def test_filter_eligible_heirs_drops_distant_kin() -> None:
    members = [
        _member(1, Relation.SON),
        _member(2, Relation.UNCLE),
        _member(3, Relation.WIFE),
        _member(4, Relation.COUSIN),
        _member(5, Relation.NIECE),
        _member(6, Relation.SIBLING),
        _member(7, Relation.SPOUSE),
        _member(8, Relation.OTHER),
    ]
    eligible = filter_eligible_heirs(members)
    assert [member.id for member in eligible] == [1, 3, 6]


def test_distant_kin_are_described_but_not_eligible() -> None:
    for relation in (Relation.UNCLE, Relation.AUNT, Relation.NEPHEW, Relation.NIECE, Relation.COUSIN):
        assert relation in FIXED_SHARES
        assert relation not in ELIGIBLE_HEIRS
