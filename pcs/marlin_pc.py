"""
레이블 기반 KZG10 다항식 커밋먼트 스킴 (Marlin 변형)
=====================================================

``pcs.kzg10`` 위에 레이블, 배치 열기, 차수 제한 강제를 올린 구체 스킴이다.
``pcs.data_structures``의 여섯 가지 능력 계약을 모두 구현한다.

**차수 제한 강제 (shifted commitment)**:
  차수 제한 d가 있는 다항식 p에 대해 시프트 다항식 x^{D-d}·p(x)도 함께
  커밋한다 (D: 범용 파라미터의 최대 차수). p의 차수가 d를 넘으면 시프트
  다항식의 차수가 D를 넘어 SRS로 커밋할 수 없으므로, 검증자는 시프트
  커밋먼트의 존재만으로 차수 제한을 확인할 수 있다.

**배치 열기**:
  한 점 z에서 여러 다항식을 챌린지 ξ로 선형결합하여 한 번에 연다.
    p*(x) = Σᵢ ξ^{2i}·pᵢ(x) + Σ_{i: 차수 제한} ξ^{2i+1}·x^{D-dᵢ}·pᵢ(x)
  검증자는 같은 결합을 커밋먼트에 대해 계산한다. 시프트 항에서는
  vᵢ·[β^{D-dᵢ}]G를 빼서 평가값을 보정한다.

사용 예시:
    >>> pp = MarlinKZG10.setup(16, rng)
    >>> ck, vk = MarlinKZG10.trim(pp, 8, enforced_degree_bounds=[4])
    >>> comms, rands = MarlinKZG10.commit(ck, [LabeledPolynomial("a", p, 4)], rng)
    >>> xi = MarlinKZG10.opening_challenge(comms, z)
    >>> proof = MarlinKZG10.open(ck, polys, z, xi, rands)
    >>> MarlinKZG10.check(vk, comms, z, {"a": p.evaluate(z)}, proof, xi)  # True
"""

import logging

from pcs import data_structures, kzg10
from pcs.data_structures import LabeledCommitment
from pcs.errors import (
    DegreeIsZero,
    DuplicateLabel,
    IncorrectDegreeBound,
    MissingEvaluation,
    MissingPolynomial,
    MissingRandomness,
    TooManyCoefficients,
    TrimmingDegreeTooLarge,
    UnsupportedDegreeBound,
)
from pcs.field import FR, G1_BYTES, ec_add, ec_mul, ec_sub, msm
from pcs.polynomial import Polynomial
from pcs.transcript import Transcript

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────
# 키
# ─────────────────────────────────────────────────────────────────────

class CommitterKey(data_structures.CommitterKey):
    """커밋 키.

    속성:
        powers: [β^i]G, i = 0..supported_degree
        shifted_powers: [β^i]G, i = D - max_bound..D (차수 제한이 없으면 None)
        powers_of_gamma_g: [β^i]γG, i = 0..supported_degree+1
        enforced_degree_bounds: 이 키로 강제할 수 있는 차수 제한 목록
    """

    def __init__(self, powers, shifted_powers, powers_of_gamma_g,
                 enforced_degree_bounds, max_degree):
        self.powers_of_g = powers
        self.shifted_powers = shifted_powers
        self.powers_of_gamma_g = powers_of_gamma_g
        self.enforced_degree_bounds = enforced_degree_bounds
        self._max_degree = max_degree

    @property
    def max_degree(self):
        return self._max_degree

    @property
    def supported_degree(self):
        return len(self.powers_of_g) - 1

    def powers(self):
        return kzg10.Powers(self.powers_of_g, self.powers_of_gamma_g)

    def shifted_powers_for(self, degree_bound):
        """차수 제한 d용 거듭제곱 [β^{D-d+i}]G, i = 0..d.

        Raises:
            UnsupportedDegreeBound: 이 키가 d를 강제하지 않을 때
        """
        if self.shifted_powers is None or degree_bound not in self.enforced_degree_bounds:
            raise UnsupportedDegreeBound(degree_bound)
        max_bound = max(self.enforced_degree_bounds)
        return kzg10.Powers(
            self.shifted_powers[max_bound - degree_bound:], self.powers_of_gamma_g
        )


class VerifierKey(data_structures.VerifierKey):
    """검증 키.

    속성:
        g, gamma_g: G1 원소
        h, beta_h: G2 원소
        degree_bounds_and_shift_powers: {d: [β^{D-d}]G}
    """

    def __init__(self, g, gamma_g, h, beta_h, degree_bounds_and_shift_powers,
                 max_degree, supported_degree):
        self.g = g
        self.gamma_g = gamma_g
        self.h = h
        self.beta_h = beta_h
        self.degree_bounds_and_shift_powers = degree_bounds_and_shift_powers
        self._max_degree = max_degree
        self._supported_degree = supported_degree

    @property
    def max_degree(self):
        return self._max_degree

    @property
    def supported_degree(self):
        return self._supported_degree

    def get_shift_power(self, degree_bound):
        return self.degree_bounds_and_shift_powers.get(degree_bound)


# ─────────────────────────────────────────────────────────────────────
# 커밋먼트 / 랜덤니스
# ─────────────────────────────────────────────────────────────────────

class Commitment(data_structures.Commitment):
    """다항식 커밋먼트와 (차수 제한 시) 시프트 다항식 커밋먼트.

    인코딩: comm 64바이트 ‖ 플래그 1바이트 ‖ (shifted_comm 64바이트)
    """

    def __init__(self, comm, shifted_comm=None):
        self.comm = comm
        self.shifted_comm = shifted_comm

    @classmethod
    def empty(cls):
        return cls(kzg10.Commitment.empty(), None)

    def has_degree_bound(self):
        return self.shifted_comm is not None

    def size_in_bytes(self):
        size = G1_BYTES + 1
        if self.shifted_comm is not None:
            size += G1_BYTES
        return size

    @classmethod
    def from_bytes(cls, data):
        """``write``의 역. 길이나 플래그가 맞지 않으면 ValueError."""
        comm = kzg10.Commitment.from_bytes(data[:G1_BYTES])
        flag = data[G1_BYTES:G1_BYTES + 1]
        if flag == b"\x00" and len(data) == G1_BYTES + 1:
            return cls(comm)
        if flag == b"\x01" and len(data) == 2 * G1_BYTES + 1:
            return cls(comm, kzg10.Commitment.from_bytes(data[G1_BYTES + 1:]))
        raise ValueError(f"잘못된 커밋먼트 인코딩 ({len(data)}바이트)")

    def write(self, writer):
        self.comm.write(writer)
        if self.shifted_comm is None:
            writer.write(b"\x00")
        else:
            writer.write(b"\x01")
            self.shifted_comm.write(writer)

    def __eq__(self, other):
        if not isinstance(other, Commitment):
            return NotImplemented
        return self.comm == other.comm and self.shifted_comm == other.shifted_comm

    def __hash__(self):
        return hash(self.to_bytes())

    def __repr__(self):
        return f"Commitment({self.to_bytes().hex()[:16]}..., degree_bound={self.has_degree_bound()})"


class Randomness(data_structures.Randomness):
    """커밋먼트 랜덤니스와 (차수 제한 시) 시프트 커밋먼트 랜덤니스."""

    def __init__(self, rand, shifted_rand=None):
        self.rand = rand
        self.shifted_rand = shifted_rand

    @classmethod
    def empty(cls):
        return cls(kzg10.Randomness.empty(), None)

    @classmethod
    def sample(cls, num_queries, rng=None, has_degree_bound=False):
        rand = kzg10.Randomness.sample(num_queries, rng)
        shifted_rand = None
        if has_degree_bound:
            shifted_rand = kzg10.Randomness.sample(num_queries, rng)
        return cls(rand, shifted_rand)

    def __eq__(self, other):
        if not isinstance(other, Randomness):
            return NotImplemented
        return self.rand == other.rand and self.shifted_rand == other.shifted_rand


Proof = kzg10.Proof


# ─────────────────────────────────────────────────────────────────────
# 스킴
# ─────────────────────────────────────────────────────────────────────

class MarlinKZG10:
    """레이블 다항식 배치를 다루는 KZG10 기반 PCS."""

    UniversalParams = kzg10.UniversalParams
    CommitterKey = CommitterKey
    VerifierKey = VerifierKey
    Commitment = Commitment
    Randomness = Randomness
    Proof = Proof

    @staticmethod
    def setup(max_degree, rng=None):
        return kzg10.setup(max_degree, rng)

    @staticmethod
    def trim(pp, supported_degree, enforced_degree_bounds=None):
        """범용 파라미터를 ``supported_degree``까지 잘라 (ck, vk)를 만든다.

        Raises:
            DegreeIsZero: supported_degree < 1
            TrimmingDegreeTooLarge: supported_degree > pp.max_degree
            UnsupportedDegreeBound: 차수 제한이 0이거나 supported_degree보다 클 때
        """
        max_degree = pp.max_degree
        if supported_degree < 1:
            raise DegreeIsZero()
        if supported_degree > max_degree:
            raise TrimmingDegreeTooLarge(supported_degree, max_degree)

        powers = pp.powers_of_g[:supported_degree + 1]
        powers_of_gamma_g = pp.powers_of_gamma_g[:supported_degree + 2]

        shifted_powers = None
        bounds = []
        shift_powers = {}
        if enforced_degree_bounds:
            bounds = sorted(set(enforced_degree_bounds))
            for bound in bounds:
                if bound < 1 or bound > supported_degree:
                    raise UnsupportedDegreeBound(bound)
            max_bound = bounds[-1]
            shifted_powers = pp.powers_of_g[max_degree - max_bound:]
            for bound in bounds:
                shift_powers[bound] = pp.powers_of_g[max_degree - bound]

        ck = CommitterKey(powers, shifted_powers, powers_of_gamma_g, bounds, max_degree)
        vk = VerifierKey(
            g=pp.powers_of_g[0],
            gamma_g=pp.powers_of_gamma_g[0],
            h=pp.h,
            beta_h=pp.beta_h,
            degree_bounds_and_shift_powers=shift_powers,
            max_degree=max_degree,
            supported_degree=supported_degree,
        )
        logger.debug(
            "trimmed params: supported_degree=%d, enforced_degree_bounds=%s",
            supported_degree, bounds,
        )
        return ck, vk

    @staticmethod
    def check_degrees_and_bounds(ck, labeled_polynomial):
        """계수 개수와 차수 제한을 커밋 키에 대해 검사한다."""
        label = labeled_polynomial.label
        num_coefficients = len(labeled_polynomial.coeffs)
        if num_coefficients > len(ck.powers_of_g):
            raise TooManyCoefficients(num_coefficients, len(ck.powers_of_g), label)

        degree_bound = labeled_polynomial.degree_bound
        if degree_bound is None:
            return
        if degree_bound not in ck.enforced_degree_bounds:
            raise UnsupportedDegreeBound(degree_bound, label)
        if labeled_polynomial.degree > degree_bound or degree_bound > ck.supported_degree:
            raise IncorrectDegreeBound(
                labeled_polynomial.degree, degree_bound, ck.supported_degree, label
            )

    @staticmethod
    def commit(ck, labeled_polynomials, rng=None):
        """레이블 다항식들을 커밋한다.

        Returns:
            tuple: (list[LabeledCommitment], list[Randomness]) 입력 순서와 같음

        Raises:
            DuplicateLabel, TooManyCoefficients, UnsupportedDegreeBound,
            IncorrectDegreeBound, HidingBoundIsZero, HidingBoundTooLarge, MissingRng
        """
        commitments = []
        randomness = []
        seen = set()
        for labeled in labeled_polynomials:
            label = labeled.label
            if label in seen:
                raise DuplicateLabel(label)
            seen.add(label)
            MarlinKZG10.check_degrees_and_bounds(ck, labeled)

            degree_bound = labeled.degree_bound
            hiding_bound = labeled.hiding_bound
            comm, rand = kzg10.commit(ck.powers(), labeled, hiding_bound, rng, label)

            shifted_comm = None
            shifted_rand = None
            if degree_bound is not None:
                shifted_comm, shifted_rand = kzg10.commit(
                    ck.shifted_powers_for(degree_bound), labeled, hiding_bound, rng, label
                )

            commitments.append(
                LabeledCommitment(label, Commitment(comm, shifted_comm), degree_bound)
            )
            randomness.append(Randomness(rand, shifted_rand))
            logger.debug(
                "committed %r (degree=%d, degree_bound=%s, hiding_bound=%s)",
                label, labeled.degree, degree_bound, hiding_bound,
            )
        return commitments, randomness

    @staticmethod
    def opening_challenge(labeled_commitments, point, label=b"marlin_kzg10"):
        """커밋먼트들과 평가 점으로부터 결합 챌린지 ξ를 도출한다."""
        transcript = Transcript(label)
        for labeled in labeled_commitments:
            transcript.append_commitment(labeled)
        transcript.append_scalar(b"point", point if isinstance(point, FR) else FR(point))
        return transcript.challenge_scalar(b"opening_challenge")

    @staticmethod
    def open(ck, labeled_polynomials, point, opening_challenge, randomness):
        """한 점에서 여러 레이블 다항식을 한 번에 여는 증명을 만든다.

        ``randomness``는 ``commit``이 반환한 목록이며 다항식과 같은 순서다.

        Raises:
            MissingRandomness: 랜덤니스 개수가 다항식보다 적을 때
        """
        if not isinstance(point, FR):
            point = FR(point)
        labeled_polynomials = list(labeled_polynomials)
        if not isinstance(opening_challenge, FR):
            opening_challenge = FR(opening_challenge)
        randomness = list(randomness)

        combined = Polynomial.zero()
        combined_blinding = Polynomial.zero()
        shifted_w = None
        shifted_random_witness = Polynomial.zero()
        shifted_random_v = FR(0)
        shifted_hiding = False
        enforce_degree_bound = False

        challenge_j = FR(1)
        for i, labeled in enumerate(labeled_polynomials):
            if i >= len(randomness):
                raise MissingRandomness(labeled.label)
            rand = randomness[i]
            MarlinKZG10.check_degrees_and_bounds(ck, labeled)

            combined = combined + labeled.polynomial * challenge_j
            combined_blinding = combined_blinding + rand.rand.blinding_polynomial * challenge_j

            degree_bound = labeled.degree_bound
            if degree_bound is not None:
                enforce_degree_bound = True
                shifted_rand = rand.shifted_rand
                if shifted_rand is None:
                    raise MissingRandomness(labeled.label)
                challenge_j_1 = challenge_j * opening_challenge
                witness, random_witness = kzg10.compute_witness_polynomial(
                    labeled.polynomial, point, shifted_rand
                )
                shifted_powers = ck.shifted_powers_for(degree_bound)
                shifted_w = ec_add(
                    shifted_w, ec_mul(msm(shifted_powers.powers_of_g, witness.coeffs), challenge_j_1)
                )
                if random_witness is not None:
                    shifted_hiding = True
                    shifted_random_witness = shifted_random_witness + random_witness * challenge_j_1
                    shifted_random_v = shifted_random_v + (
                        shifted_rand.blinding_polynomial.evaluate(point) * challenge_j_1
                    )

            challenge_j = challenge_j * opening_challenge * opening_challenge

        proof = kzg10.open(ck.powers(), combined, point, kzg10.Randomness(combined_blinding))
        if enforce_degree_bound:
            w = ec_add(proof.w, shifted_w)
            random_v = proof.random_v
            if shifted_hiding:
                w = ec_add(w, msm(ck.powers_of_gamma_g, shifted_random_witness.coeffs))
                random_v = (random_v if random_v is not None else FR(0)) + shifted_random_v
            proof = Proof(w, random_v)

        logger.debug("opened %d polynomials at z=%d", len(labeled_polynomials), int(point))
        return proof

    @staticmethod
    def accumulate_commitments(vk, labeled_commitments, values, opening_challenge):
        """ξ로 커밋먼트와 평가값을 결합한다.

        Returns:
            tuple: (결합 커밋먼트 G1 점, 결합 평가값 FR)
        """
        if not isinstance(opening_challenge, FR):
            opening_challenge = FR(opening_challenge)
        combined_comm = None
        combined_value = FR(0)
        challenge_j = FR(1)
        for labeled in labeled_commitments:
            label = labeled.label
            if label not in values:
                raise MissingEvaluation(label)
            value = values[label]
            if not isinstance(value, FR):
                value = FR(value)
            commitment = labeled.commitment
            degree_bound = labeled.degree_bound

            combined_comm = ec_add(combined_comm, ec_mul(commitment.comm.point, challenge_j))
            combined_value = combined_value + value * challenge_j

            if degree_bound is not None:
                shift_power = vk.get_shift_power(degree_bound)
                if shift_power is None or not commitment.has_degree_bound():
                    raise UnsupportedDegreeBound(degree_bound, label)
                challenge_j_1 = challenge_j * opening_challenge
                adjusted = ec_sub(commitment.shifted_comm.point, ec_mul(shift_power, value))
                combined_comm = ec_add(combined_comm, ec_mul(adjusted, challenge_j_1))

            challenge_j = challenge_j * opening_challenge * opening_challenge
        return combined_comm, combined_value

    @staticmethod
    def check(vk, labeled_commitments, point, values, proof, opening_challenge):
        """배치 열기 증명을 검증한다.

        Args:
            values: {label: 평가값}

        Returns:
            bool: 검증 성공 여부

        Raises:
            MissingEvaluation: 어떤 레이블의 평가값이 없을 때
            UnsupportedDegreeBound: 검증 키가 커밋먼트의 차수 제한을 모를 때
        """
        labeled_commitments = list(labeled_commitments)
        combined_comm, combined_value = MarlinKZG10.accumulate_commitments(
            vk, labeled_commitments, values, opening_challenge
        )
        ok = kzg10.check(vk, combined_comm, point, combined_value, proof)
        logger.debug("checked %d commitments: %s", len(labeled_commitments), ok)
        return ok

    @staticmethod
    def _group_query_set(query_set):
        points = []
        labels_by_point = {}
        for label, point in query_set:
            point = point if isinstance(point, FR) else FR(point)
            key = int(point)
            if key not in labels_by_point:
                labels_by_point[key] = []
                points.append(point)
            labels_by_point[key].append(label)
        points.sort(key=int)
        return points, labels_by_point

    @staticmethod
    def batch_open(ck, labeled_polynomials, query_set, opening_challenge, randomness):
        """질의 집합 [(label, point), ...]의 점마다 증명을 하나씩 만든다.

        Returns:
            list[Proof]: 서로 다른 점마다 하나씩, 점의 오름차순
        """
        labeled_polynomials = list(labeled_polynomials)
        randomness = list(randomness)
        by_label = {p.label: (p, r) for p, r in zip(labeled_polynomials, randomness)}
        points, labels_by_point = MarlinKZG10._group_query_set(query_set)

        proofs = []
        for point in points:
            polys = []
            rands = []
            for label in labels_by_point[int(point)]:
                if label not in by_label:
                    raise MissingPolynomial(label)
                poly, rand = by_label[label]
                polys.append(poly)
                rands.append(rand)
            proofs.append(MarlinKZG10.open(ck, polys, point, opening_challenge, rands))
        return proofs

    @staticmethod
    def batch_check(vk, labeled_commitments, query_set, evaluations, proofs, opening_challenge):
        """``batch_open``의 증명들을 검증한다.

        Args:
            evaluations: {(label, int(point)): 평가값}
        """
        by_label = {c.label: c for c in labeled_commitments}
        points, labels_by_point = MarlinKZG10._group_query_set(query_set)
        proofs = list(proofs)
        if len(proofs) != len(points):
            return False

        for point, proof in zip(points, proofs):
            comms = []
            values = {}
            for label in labels_by_point[int(point)]:
                if label not in by_label:
                    raise MissingPolynomial(label)
                key = (label, int(point))
                if key not in evaluations:
                    raise MissingEvaluation(label)
                comms.append(by_label[label])
                values[label] = evaluations[key]
            if not MarlinKZG10.check(vk, comms, point, values, proof, opening_challenge):
                return False
        return True


__all__ = [
    "CommitterKey", "VerifierKey", "Commitment", "Randomness", "Proof",
    "MarlinKZG10",
]
