"""Tests for ClaimManager eligibility and claim mutations."""

import pytest

from bedassign.core.claims import ClaimManager
from bedassign.core.colony import Designation
from bedassign.core.thoughts import TraitName


@pytest.fixture
def claims(colony, forced_beds):
    return ClaimManager(colony, forced_beds)


class TestPawnEligibility:
    def test_colonist_is_usable(self, claims, make_pawn):
        assert claims.can_use_pawn(make_pawn("ann"))

    def test_none_is_not_usable(self, claims):
        assert not claims.can_use_pawn(None)

    def test_other_faction(self, claims, make_pawn):
        assert not claims.can_use_pawn(make_pawn("raider", faction="pirates"))

    def test_slave(self, claims, make_pawn):
        assert not claims.can_use_pawn(make_pawn("sam", is_slave=True))

    def test_prisoner_is_not_free_colonist(self, claims, make_pawn):
        assert not claims.can_use_pawn(make_pawn("pat", is_free_colonist=False))

    def test_animal(self, claims, make_pawn):
        assert not claims.can_use_pawn(make_pawn("husky", humanlike=False))

    def test_no_ownership_record(self, claims, make_pawn):
        assert not claims.can_use_pawn(make_pawn("ghost", has_ownership=False))


class TestBedEligibility:
    def test_plain_bed_is_usable(self, claims, make_bed):
        assert claims.can_use_bed(make_bed("b1"))

    def test_medical(self, claims, make_bed):
        bed = make_bed("b1")
        bed.medical = True
        assert not claims.can_use_bed(bed)
        bed.medical = False
        assert claims.can_use_bed(bed)

    def test_prisoner_bed(self, claims, make_bed):
        assert not claims.can_use_bed(make_bed("b1", for_colonists=False))

    def test_animal_bed(self, claims, make_bed):
        assert not claims.can_use_bed(make_bed("b1", humanlike=False))

    @pytest.mark.parametrize("designation", [Designation.DECONSTRUCT, Designation.UNINSTALL])
    def test_designated_for_removal(self, claims, colony, make_bed, designation):
        bed = make_bed("b1")
        colony.designate(bed, designation)
        assert not claims.can_use_bed(bed)
        colony.clear_designations(bed)
        assert claims.can_use_bed(bed)

    def test_other_designation_is_fine(self, claims, colony, make_bed):
        bed = make_bed("b1")
        colony.designate(bed, Designation.PAINT)
        assert claims.can_use_bed(bed)

    def test_usability_check_has_no_side_effects(self, claims, make_pawn, make_bed):
        bed = make_bed("b1")
        pawn = make_pawn("ann")
        pawn.ownership.claim_bed(bed)
        bed.medical = True
        claims.can_use_bed(bed)
        assert bed.owners == [pawn]


class TestForcedBed:
    def test_valid_forced_bed(self, claims, forced_beds, make_pawn, make_bed):
        pawn, bed = make_pawn("ann"), make_bed("b1")
        forced_beds.force(pawn, bed)
        assert claims.forced_bed(pawn) is bed

    def test_other_map(self, claims, forced_beds, make_pawn, make_bed):
        pawn, bed = make_pawn("ann"), make_bed("b1", map_id="m2")
        forced_beds.force(pawn, bed)
        assert claims.forced_bed(pawn) is None

    def test_unusable_forced_bed(self, claims, colony, forced_beds, make_pawn, make_bed):
        pawn, bed = make_pawn("ann"), make_bed("b1")
        forced_beds.force(pawn, bed)
        colony.designate(bed, Designation.DECONSTRUCT)
        assert claims.forced_bed(pawn) is None

    def test_despawned_forced_bed(self, claims, colony, forced_beds, make_pawn, make_bed):
        pawn, bed = make_pawn("ann"), make_bed("b1")
        forced_beds.force(pawn, bed)
        colony.remove_bed("b1")
        assert claims.forced_bed(pawn) is None


class TestMostLikedPartner:
    def test_partner_on_same_map(self, claims, make_pawn, make_lovers):
        a, b = make_pawn("ann"), make_pawn("bob")
        make_lovers(a, b)
        assert claims.most_liked_partner(a) is b

    def test_partner_on_other_map(self, claims, make_pawn, make_lovers):
        a, b = make_pawn("ann"), make_pawn("bob", map_id="m2")
        make_lovers(a, b)
        assert claims.most_liked_partner(a) is None

    def test_unusable_partner(self, claims, make_pawn, make_lovers):
        a, b = make_pawn("ann"), make_pawn("bob", is_slave=True)
        make_lovers(a, b)
        assert claims.most_liked_partner(a) is None

    def test_mutuality_not_required(self, claims, colony, make_pawn, make_lovers):
        a, b, c = make_pawn("ann"), make_pawn("bob"), make_pawn("cat")
        make_lovers(a, b, opinion=10)
        make_lovers(b, c, opinion=90)
        assert claims.most_liked_partner(a) is b
        assert claims.most_liked_partner(b) is c


class TestClaim:
    def test_claim_empty_bed(self, claims, make_pawn, make_bed):
        pawn, bed = make_pawn("ann"), make_bed("b1")
        assert claims.claim(pawn, bed)
        assert pawn.owned_bed is bed
        assert bed.owners == [pawn]

    def test_claim_releases_previous_bed(self, claims, make_pawn, make_bed):
        pawn, old, new = make_pawn("ann"), make_bed("old"), make_bed("new")
        pawn.ownership.claim_bed(old)
        assert claims.claim(pawn, new)
        assert old.owners == []
        assert pawn.owned_bed is new

    def test_already_claimed(self, claims, make_pawn, make_bed):
        pawn, bed = make_pawn("ann"), make_bed("b1")
        pawn.ownership.claim_bed(bed)
        assert not claims.claim(pawn, bed)
        assert bed.owners == [pawn]

    def test_different_map(self, claims, make_pawn, make_bed):
        pawn, bed = make_pawn("ann"), make_bed("b1", map_id="m2")
        assert not claims.claim(pawn, bed)
        assert pawn.owned_bed is None

    def test_unusable_bed(self, claims, make_pawn, make_bed):
        assert not claims.claim(make_pawn("ann"), make_bed("b1", medical=True))

    def test_unusable_pawn(self, claims, make_pawn, make_bed):
        bed = make_bed("b1")
        assert not claims.claim(make_pawn("sam", is_slave=True), bed)
        assert bed.owners == []

    def test_ideology_forbids(self, claims, make_pawn, make_bed):
        pawn = make_pawn("ann", ideology="ascetic_order")
        bed = make_bed("b1", forbidden_ideologies=frozenset({"ascetic_order"}))
        assert not claims.claim(pawn, bed)

    def test_forced_bed_blocks_other_beds(self, claims, forced_beds, make_pawn, make_bed):
        pawn, forced, other = make_pawn("ann"), make_bed("forced"), make_bed("other")
        forced_beds.force(pawn, forced)
        assert not claims.claim(pawn, other)
        assert claims.claim(pawn, forced)

    def test_evicts_stranger(self, claims, make_pawn, make_bed):
        ann, cal, bed = make_pawn("ann"), make_pawn("cal"), make_bed("b1")
        cal.ownership.claim_bed(bed)
        assert claims.claim(ann, bed)
        assert bed.owners == [ann]
        assert cal.owned_bed is None

    def test_failed_eviction_keeps_owners(self, claims, forced_beds, make_pawn, make_bed):
        ann, cal, bed = make_pawn("ann"), make_pawn("cal"), make_bed("b1")
        cal.ownership.claim_bed(bed)
        forced_beds.force(cal, bed)
        assert not claims.claim(ann, bed)
        assert bed.owners == [cal]
        assert ann.owned_bed is None

    def test_keeps_own_partner(self, claims, make_pawn, make_bed, make_lovers):
        ann, bob, bed = make_pawn("ann"), make_pawn("bob"), make_bed("b1", slots=2)
        make_lovers(ann, bob)
        bob.ownership.claim_bed(bed)
        assert claims.claim(ann, bed)
        assert set(bed.owners) == {ann, bob}

    def test_keeps_lovers_favourite(self, claims, make_pawn, make_bed, make_lovers):
        ann, bob, cat = make_pawn("ann"), make_pawn("bob"), make_pawn("cat")
        bed = make_bed("b1", slots=3)
        make_lovers(ann, bob, opinion=20)
        make_lovers(bob, cat, opinion=80)
        cat.ownership.claim_bed(bed)
        assert claims.claim(ann, bed, bob)
        assert cat in bed.owners

    def test_spouse_only_precept_blocks_make_space(self, claims, make_pawn, make_bed, make_lovers):
        ann = make_pawn("ann", spouse_only_bed_sharing=True)
        bob, cal = make_pawn("bob"), make_pawn("cal")
        make_lovers(ann, bob)
        bed = make_bed("b1")
        cal.ownership.claim_bed(bed)
        assert not claims.claim(ann, bed, bob)
        assert bed.owners == [cal]

    def test_make_space_error_is_ignored(self, claims, make_pawn, make_bed, monkeypatch):
        pawn, bed = make_pawn("ann"), make_bed("b1")

        def boom(*args, **kwargs):
            raise RuntimeError("eviction exploded")

        monkeypatch.setattr(claims, "make_space", boom)
        assert claims.claim(pawn, bed)
        assert pawn.owned_bed is bed

    def test_without_make_space_keeps_strangers(self, claims, make_pawn, make_bed):
        ann, cal = make_pawn("ann"), make_pawn("cal")
        bed = make_bed("b1", slots=2)
        cal.ownership.claim_bed(bed)
        assert claims.claim(ann, bed, make_space=False)
        assert set(bed.owners) == {ann, cal}

    def test_without_make_space_full_bed_fails(self, claims, make_pawn, make_bed):
        ann, cal, bed = make_pawn("ann"), make_pawn("cal"), make_bed("b1")
        cal.ownership.claim_bed(bed)
        assert not claims.claim(ann, bed, make_space=False)
        assert bed.owners == [cal]
        assert ann.owned_bed is None

    def test_claim_refusal_reasons(self, claims, forced_beds, make_pawn, make_bed):
        bed = make_bed("b1", forbidden_ideologies=frozenset({"ascetic_order"}))
        assert claims.claim_refusal(make_pawn("ann"), bed) is None
        assert "ideology" in claims.claim_refusal(make_pawn("bea", ideology="ascetic_order"), bed)
        cal = make_pawn("cal")
        forced_beds.force(cal, make_bed("b2"))
        assert "forced" in claims.claim_refusal(cal, bed)
        assert "map" in claims.claim_refusal(make_pawn("dan", map_id="m2"), bed)

    def test_capacity_never_exceeded(self, claims, make_pawn, make_bed, make_lovers):
        bed = make_bed("b1", slots=2)
        pawns = [make_pawn(f"p{i}") for i in range(4)]
        make_lovers(pawns[0], pawns[1])
        make_lovers(pawns[2], pawns[3])
        for pawn in pawns:
            claims.claim(pawn, bed)
            assert len(bed.owners) <= bed.sleeping_slots


class TestUnclaim:
    def test_unclaim(self, claims, make_pawn, make_bed):
        pawn, bed = make_pawn("ann"), make_bed("b1")
        pawn.ownership.claim_bed(bed)
        assert claims.unclaim(pawn)
        assert pawn.owned_bed is None
        assert bed.owners == []

    def test_no_bed(self, claims, make_pawn):
        assert not claims.unclaim(make_pawn("ann"))

    def test_forced_bed_is_protected(self, claims, forced_beds, make_pawn, make_bed):
        pawn, bed = make_pawn("ann"), make_bed("b1")
        pawn.ownership.claim_bed(bed)
        forced_beds.force(pawn, bed)
        assert not claims.can_unclaim(pawn)
        assert not claims.unclaim(pawn)
        assert pawn.owned_bed is bed

    def test_invalid_forced_bed_can_be_released(self, claims, colony, forced_beds, make_pawn, make_bed):
        pawn, bed = make_pawn("ann"), make_bed("b1")
        pawn.ownership.claim_bed(bed)
        forced_beds.force(pawn, bed)
        colony.designate(bed, Designation.UNINSTALL)
        assert claims.unclaim(pawn)

    def test_excluded_trait_does_not_matter_for_unclaim(self, claims, make_pawn, make_bed):
        pawn = make_pawn("ann", traits=[TraitName.JEALOUS.value])
        pawn.ownership.claim_bed(make_bed("b1"))
        assert claims.unclaim(pawn)
