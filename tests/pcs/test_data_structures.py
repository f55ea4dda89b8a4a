"""
Tests for pcs.data_structures: capability contracts and labeled wrappers.

Covers:
- LabeledPolynomial: label/metadata accessors, evaluation, delegation to the
  wrapped polynomial, owned vs borrowed storage, cloning
- is_hiding() <=> hiding_bound is not None for every bound combination
- LabeledCommitment: accessors, byte-transparent serialization
- Contracts: abstract classes refuse instantiation, empty() values
"""

import copy
import io
import random

import pytest
from py_ecc.fields import bn128_FQ as FQ

from pcs import data_structures, kzg10
from pcs.data_structures import LabeledCommitment, LabeledPolynomial
from pcs.field import FR, G1, ec_mul
from pcs.marlin_pc import Commitment, Randomness
from pcs.polynomial import Polynomial


class F17(FQ):
    field_modulus = 17


# ─────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture
def poly():
    """1 + 2x + 3x²"""
    return Polynomial([FR(1), FR(2), FR(3)])


@pytest.fixture
def nontrivial_commitment():
    """degree-bounded commitment: 64 + 1 + 64 bytes, both points non-zero."""
    return Commitment(
        kzg10.Commitment(ec_mul(G1, 12345)),
        kzg10.Commitment(ec_mul(G1, 67890)),
    )


# ─────────────────────────────────────────────────────────────────────
# LabeledPolynomial
# ─────────────────────────────────────────────────────────────────────

class TestLabeledPolynomial:
    """LabeledPolynomial 테스트."""

    def test_scenario_p1(self):
        """new_owned("p1", [1,2,3], degree_bound=2): bound kept, not hiding, p(1) = 6."""
        p = LabeledPolynomial.new_owned("p1", Polynomial([1, 2, 3]), 2, None)
        assert p.degree_bound == 2
        assert p.is_hiding() is False
        assert p.evaluate(FR(1)) == FR(6)

    def test_label_unchanged_by_reads(self, poly):
        p = LabeledPolynomial("alpha", poly, None, 3)
        p.evaluate(FR(5))
        _ = p.polynomial
        _ = p.coeffs
        _ = p.degree_bound
        assert p.label == "alpha"

    def test_label_is_read_only(self, poly):
        p = LabeledPolynomial("alpha", poly)
        with pytest.raises(AttributeError):
            p.label = "beta"

    @pytest.mark.parametrize("x", [0, 1, 2, 7, 123456789])
    def test_evaluate_matches_raw_polynomial(self, poly, x):
        p = LabeledPolynomial.new_owned("p", poly, None, None)
        assert p.evaluate(FR(x)) == poly.evaluate(FR(x))

    @pytest.mark.parametrize("degree_bound, hiding_bound", [
        (None, None),
        (4, None),
        (None, 1),
        (4, 2),
    ])
    def test_is_hiding_iff_hiding_bound(self, poly, degree_bound, hiding_bound):
        for p in (
            LabeledPolynomial("x", poly, degree_bound, hiding_bound),
            LabeledPolynomial.new_owned("x", poly, degree_bound, hiding_bound),
        ):
            assert p.is_hiding() == (p.hiding_bound is not None)
            assert p.degree_bound == degree_bound
            assert p.hiding_bound == hiding_bound

    def test_zero_hiding_bound_still_counts_as_hiding(self, poly):
        """No validation here: hiding_bound=0 is accepted and reported as hiding."""
        p = LabeledPolynomial("x", poly, None, 0)
        assert p.is_hiding()

    def test_owned_and_borrowed_are_equivalent(self, poly):
        borrowed = LabeledPolynomial("p", poly, 3, 1)
        owned = LabeledPolynomial.new_owned("p", Polynomial([1, 2, 3]), 3, 1)
        assert not borrowed.is_owned
        assert owned.is_owned
        assert borrowed.polynomial == owned.polynomial
        assert borrowed.degree_bound == owned.degree_bound
        assert borrowed.hiding_bound == owned.hiding_bound
        for x in (0, 3, 99):
            assert borrowed.evaluate(FR(x)) == owned.evaluate(FR(x))

    def test_borrowed_shares_polynomial(self, poly):
        p = LabeledPolynomial("p", poly)
        assert p.polynomial is poly

    def test_transparent_delegation(self, poly):
        """Attributes of the raw polynomial are reachable on the wrapper."""
        p = LabeledPolynomial("p", poly)
        assert p.coeffs == poly.coeffs
        assert p.degree == 2
        assert not p.is_zero()
        assert len(p) == 3
        assert p[1] == FR(2)
        assert list(p) == poly.coeffs

    def test_missing_attribute_raises(self, poly):
        p = LabeledPolynomial("p", poly)
        with pytest.raises(AttributeError):
            p.not_a_polynomial_attribute

    def test_generic_consumer_accepts_both(self, poly):
        """Anything reading .coeffs works with raw and labeled polynomials."""
        def coefficient_sum(q):
            total = FR(0)
            for c in q.coeffs:
                total = total + c
            return total

        assert coefficient_sum(poly) == coefficient_sum(LabeledPolynomial("p", poly))

    def test_to_owned_copies(self, poly):
        p = LabeledPolynomial("p", poly, 2, None)
        owned = p.to_owned()
        assert owned.is_owned
        assert owned.polynomial == poly
        assert owned.polynomial is not poly
        assert owned.label == "p"
        assert owned.degree_bound == 2

    def test_clone_owned_is_independent(self, poly):
        p = LabeledPolynomial.new_owned("p", poly, None, 1)
        clone = p.clone()
        assert clone.polynomial == p.polynomial
        assert clone.polynomial is not p.polynomial
        assert clone.hiding_bound == 1

    def test_deepcopy(self, poly):
        p = LabeledPolynomial("p", poly, 5, None)
        dup = copy.deepcopy(p)
        assert dup.label == "p"
        assert dup.degree_bound == 5
        assert dup.polynomial == poly

    def test_generic_field(self):
        """Wrapping works for any field, not just FR."""
        raw = Polynomial([1, 2, 3], field=F17)
        p = LabeledPolynomial("small", raw)
        # 1 + 2*5 + 3*25 = 86 = 1 mod 17
        assert p.evaluate(F17(5)) == F17(1)
        assert p.field is F17


# ─────────────────────────────────────────────────────────────────────
# LabeledCommitment
# ─────────────────────────────────────────────────────────────────────

class TestLabeledCommitment:
    """LabeledCommitment 테스트."""

    def test_accessors(self, nontrivial_commitment):
        lc = LabeledCommitment("a", nontrivial_commitment, 4)
        assert lc.label == "a"
        assert lc.commitment is nontrivial_commitment
        assert lc.degree_bound == 4

    def test_default_degree_bound(self):
        lc = LabeledCommitment("a", Commitment.empty())
        assert lc.degree_bound is None

    @pytest.mark.parametrize("label, bound", [("a", None), ("b", 3), ("a much longer label", 100)])
    def test_serialization_matches_inner(self, nontrivial_commitment, label, bound):
        lc = LabeledCommitment(label, nontrivial_commitment, bound)
        assert lc.to_bytes() == nontrivial_commitment.to_bytes()
        assert len(lc.to_bytes()) == 129

    def test_write_to_stream(self, nontrivial_commitment):
        lc = LabeledCommitment("a", nontrivial_commitment, 3)
        out_labeled = io.BytesIO()
        out_raw = io.BytesIO()
        lc.write(out_labeled)
        nontrivial_commitment.write(out_raw)
        assert out_labeled.getvalue() == out_raw.getvalue()
        assert bytes(lc) == out_raw.getvalue()

    def test_different_labels_same_bytes(self, nontrivial_commitment):
        a = LabeledCommitment("a", nontrivial_commitment, 3)
        b = LabeledCommitment("b", nontrivial_commitment, None)
        assert a.to_bytes() == b.to_bytes()
        assert a != b

    def test_clone_is_equal_and_independent(self, nontrivial_commitment):
        lc = LabeledCommitment("a", nontrivial_commitment, 3)
        clone = lc.clone()
        assert clone == lc
        assert clone.commitment is not lc.commitment


# ─────────────────────────────────────────────────────────────────────
# Capability contracts
# ─────────────────────────────────────────────────────────────────────

class TestContracts:
    """능력 계약 테스트."""

    @pytest.mark.parametrize("contract", [
        data_structures.UniversalParams,
        data_structures.CommitterKey,
        data_structures.VerifierKey,
        data_structures.Commitment,
        data_structures.Randomness,
        data_structures.Proof,
    ])
    def test_contracts_are_abstract(self, contract):
        with pytest.raises(TypeError):
            contract()

    def test_incomplete_implementation_is_rejected(self):
        class HalfCommitment(data_structures.Commitment):
            @classmethod
            def empty(cls):
                return cls()

        with pytest.raises(TypeError):
            HalfCommitment()

    @pytest.mark.parametrize("cls", [Commitment, kzg10.Commitment])
    def test_empty_commitment_has_no_degree_bound(self, cls):
        assert cls.empty().has_degree_bound() is False

    def test_empty_commitment_size_is_stable(self):
        sizes = {Commitment.empty().size_in_bytes() for _ in range(5)}
        assert sizes == {65}
        assert len(Commitment.empty().to_bytes()) == 65

    def test_size_in_bytes_matches_encoding(self, nontrivial_commitment):
        assert nontrivial_commitment.size_in_bytes() == len(nontrivial_commitment.to_bytes())

    def test_empty_randomness_is_not_hiding(self):
        r = Randomness.empty()
        assert not r.rand.is_hiding()
        assert r.shifted_rand is None

    def test_sample_randomness(self):
        rng = random.Random(7)
        r = Randomness.sample(3, rng, has_degree_bound=True)
        # hides against 3 queries: blinding polynomial of degree 3 + 1
        assert r.rand.blinding_polynomial.degree == 4
        assert r.shifted_rand.blinding_polynomial.degree == 4
        assert r.rand.is_hiding()

    def test_sample_is_deterministic_for_seeded_rng(self):
        a = kzg10.Randomness.sample(2, random.Random(1))
        b = kzg10.Randomness.sample(2, random.Random(1))
        assert a == b

    def test_proof_size_in_bytes(self):
        plain = kzg10.Proof(ec_mul(G1, 3))
        hiding = kzg10.Proof(ec_mul(G1, 3), FR(9))
        assert plain.size_in_bytes() == len(plain.to_bytes()) == 65
        assert hiding.size_in_bytes() == len(hiding.to_bytes()) == 97

    def test_contract_types_are_cloneable(self, nontrivial_commitment):
        clone = nontrivial_commitment.clone()
        assert clone == nontrivial_commitment
        assert clone is not nontrivial_commitment
        assert isinstance(clone, data_structures.Commitment)

    @pytest.mark.parametrize("make", [
        lambda c: c,
        lambda c: Commitment(c.comm),
        lambda c: Commitment.empty(),
    ])
    def test_commitment_from_bytes(self, nontrivial_commitment, make):
        commitment = make(nontrivial_commitment)
        assert Commitment.from_bytes(commitment.to_bytes()) == commitment

    def test_commitment_from_bytes_rejects_bad_flag(self, nontrivial_commitment):
        data = bytearray(nontrivial_commitment.to_bytes())
        data[64] = 2
        with pytest.raises(ValueError):
            Commitment.from_bytes(bytes(data))

    def test_commitment_from_bytes_rejects_truncated(self, nontrivial_commitment):
        with pytest.raises(ValueError):
            Commitment.from_bytes(nontrivial_commitment.to_bytes()[:100])

    @pytest.mark.parametrize("random_v", [None, FR(9)])
    def test_proof_from_bytes(self, random_v):
        proof = kzg10.Proof(ec_mul(G1, 3), random_v)
        assert kzg10.Proof.from_bytes(proof.to_bytes()) == proof
