"""
KZG10 다항식 커밋먼트 (단일 다항식 기본 연산)
==============================================

Kate-Zaverucha-Goldberg 커밋먼트의 기본 연산을 정의한다.
레이블/배치/차수 제한은 ``pcs.marlin_pc``가 이 위에 쌓는다.

**설정 (setup)**:
  비밀 값 β, γ ("toxic waste")로부터
  - powers_of_g:       [G, βG, β²G, ..., β^D G]
  - powers_of_gamma_g: [γG, βγG, ..., β^{D+1}γG]   (하이딩용)
  - h, beta_h:         [H, βH]  (G2)

**커밋먼트**:
  C = p(β)·G + r(β)·γG
  r(x)는 블라인딩 다항식이며, 비하이딩이면 0이다.

**열기 증명**:
  w(x) = (p(x) - p(z)) / (x - z),  w_r(x) = (r(x) - r(z)) / (x - z)
  π = w(β)·G + w_r(β)·γG,  random_v = r(z)

**검증**:
  e(C - y·G - random_v·γG, H) == e(π, βH - z·H)

사용 예시:
    >>> pp = setup(max_degree=8, rng=random.Random(42))
    >>> powers = Powers(pp.powers_of_g, pp.powers_of_gamma_g)
    >>> comm, rand = commit(powers, poly)
    >>> proof = open(powers, poly, FR(7), rand)
"""

import logging
import secrets

from pcs import data_structures
from pcs.errors import DegreeIsZero, HidingBoundIsZero, HidingBoundTooLarge, MissingRng, TooManyCoefficients
from pcs.field import (
    FR, G1, G2, G1_BYTES, FR_BYTES,
    ec_mul, ec_add, ec_sub, ec_pairing, msm,
    random_fr, fr_to_bytes, fr_from_bytes, g1_to_bytes, g1_from_bytes,
)
from pcs.polynomial import Polynomial, divide_by_linear

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────
# 파라미터와 키
# ─────────────────────────────────────────────────────────────────────

class UniversalParams(data_structures.UniversalParams):
    """KZG10 범용 공개 파라미터.

    속성:
        powers_of_g: [β^i]G, i = 0..D
        powers_of_gamma_g: [β^i]γG, i = 0..D+1
        h: G2 생성자
        beta_h: βH
    """

    def __init__(self, powers_of_g, powers_of_gamma_g, h, beta_h):
        self.powers_of_g = powers_of_g
        self.powers_of_gamma_g = powers_of_gamma_g
        self.h = h
        self.beta_h = beta_h

    @property
    def max_degree(self):
        return len(self.powers_of_g) - 1


class Powers:
    """커밋에 사용할 G1 거듭제곱 묶음 (커밋 키의 한 조각)."""

    def __init__(self, powers_of_g, powers_of_gamma_g):
        self.powers_of_g = powers_of_g
        self.powers_of_gamma_g = powers_of_gamma_g

    def __len__(self):
        return len(self.powers_of_g)


class VerifierKey:
    """단일 다항식 검증에 필요한 최소 원소."""

    def __init__(self, g, gamma_g, h, beta_h):
        self.g = g
        self.gamma_g = gamma_g
        self.h = h
        self.beta_h = beta_h


# ─────────────────────────────────────────────────────────────────────
# 커밋먼트 / 랜덤니스 / 증명
# ─────────────────────────────────────────────────────────────────────

class Commitment(data_structures.Commitment):
    """G1 점 하나로 된 KZG10 커밋먼트. 인코딩: 64바이트 (x‖y)."""

    def __init__(self, point=None):
        self.point = point

    @classmethod
    def empty(cls):
        return cls(None)

    def has_degree_bound(self):
        return False

    def size_in_bytes(self):
        return G1_BYTES

    @classmethod
    def from_bytes(cls, data):
        return cls(g1_from_bytes(data))

    def write(self, writer):
        writer.write(g1_to_bytes(self.point))

    def __eq__(self, other):
        if not isinstance(other, Commitment):
            return NotImplemented
        return self.point == other.point

    def __hash__(self):
        return hash(self.to_bytes())

    def __repr__(self):
        return f"kzg10.Commitment({self.to_bytes().hex()[:16]}...)"


class Randomness(data_structures.Randomness):
    """블라인딩 다항식 r(x)."""

    def __init__(self, blinding_polynomial=None):
        if blinding_polynomial is None:
            blinding_polynomial = Polynomial.zero()
        self.blinding_polynomial = blinding_polynomial

    @staticmethod
    def hiding_polynomial_degree(hiding_bound):
        # 열기 증명이 r(z)를 하나 더 노출하므로 한 차수를 추가한다
        return hiding_bound + 1

    @classmethod
    def empty(cls):
        return cls()

    @classmethod
    def sample(cls, num_queries, rng=None):
        degree = cls.hiding_polynomial_degree(num_queries)
        return cls(Polynomial.random(degree, rng))

    def is_hiding(self):
        return not self.blinding_polynomial.is_zero()

    def __eq__(self, other):
        if not isinstance(other, Randomness):
            return NotImplemented
        return self.blinding_polynomial == other.blinding_polynomial


class Proof(data_structures.Proof):
    """KZG10 평가 증명.

    속성:
        w: 몫 다항식 커밋먼트 (G1 점)
        random_v: 하이딩 시 r(z), 아니면 None

    인코딩: w 64바이트 ‖ 플래그 1바이트 ‖ (random_v 32바이트)
    """

    def __init__(self, w, random_v=None):
        self.w = w
        self.random_v = random_v

    def size_in_bytes(self):
        size = G1_BYTES + 1
        if self.random_v is not None:
            size += FR_BYTES
        return size

    @classmethod
    def from_bytes(cls, data):
        """``write``의 역. 길이나 플래그가 맞지 않으면 ValueError."""
        w = g1_from_bytes(data[:G1_BYTES])
        flag = data[G1_BYTES:G1_BYTES + 1]
        if flag == b"\x00" and len(data) == G1_BYTES + 1:
            return cls(w)
        if flag == b"\x01" and len(data) == G1_BYTES + 1 + FR_BYTES:
            return cls(w, fr_from_bytes(data[G1_BYTES + 1:]))
        raise ValueError(f"잘못된 증명 인코딩 ({len(data)}바이트)")

    def write(self, writer):
        writer.write(g1_to_bytes(self.w))
        if self.random_v is None:
            writer.write(b"\x00")
        else:
            writer.write(b"\x01")
            writer.write(fr_to_bytes(self.random_v))

    def __eq__(self, other):
        if not isinstance(other, Proof):
            return NotImplemented
        return self.to_bytes() == other.to_bytes()

    def __hash__(self):
        return hash(self.to_bytes())

    def __repr__(self):
        return f"kzg10.Proof({self.to_bytes().hex()[:16]}...)"


# ─────────────────────────────────────────────────────────────────────
# 기본 연산
# ─────────────────────────────────────────────────────────────────────

def setup(max_degree, rng=None):
    """범용 파라미터를 생성한다.

    Args:
        max_degree: 지원할 최대 다항식 차수 D (1 이상)
        rng: ``randrange``를 제공하는 난수 생성기.
             결정론적 생성에는 ``random.Random(seed)``를 넘긴다.

    Raises:
        DegreeIsZero: max_degree < 1
    """
    if max_degree < 1:
        raise DegreeIsZero()
    if rng is None:
        rng = secrets.SystemRandom()

    beta = random_fr(rng)
    while int(beta) == 0:
        beta = random_fr(rng)
    gamma = random_fr(rng)
    while int(gamma) == 0:
        gamma = random_fr(rng)

    powers_of_g = []
    powers_of_gamma_g = []
    beta_power = FR(1)
    for i in range(max_degree + 2):
        if i <= max_degree:
            powers_of_g.append(ec_mul(G1, beta_power))
        powers_of_gamma_g.append(ec_mul(G1, beta_power * gamma))
        beta_power = beta_power * beta

    beta_h = ec_mul(G2, beta)
    logger.debug("generated KZG10 universal params (max_degree=%d)", max_degree)
    return UniversalParams(powers_of_g, powers_of_gamma_g, G2, beta_h)


def check_degree_is_within_bounds(num_coefficients, num_powers, label=None):
    if num_coefficients > num_powers:
        raise TooManyCoefficients(num_coefficients, num_powers, label)


def check_hiding_bound(hiding_bound, num_powers, label=None):
    if hiding_bound < 1:
        raise HidingBoundIsZero(label)
    degree = Randomness.hiding_polynomial_degree(hiding_bound)
    if degree + 1 > num_powers:
        raise HidingBoundTooLarge(degree, num_powers, label)


def commit(powers, polynomial, hiding_bound=None, rng=None, label=None):
    """다항식을 커밋한다.

    ``polynomial``은 ``coeffs``를 가진 어떤 객체든 된다
    (Polynomial 또는 LabeledPolynomial).

    Returns:
        tuple: (Commitment, Randomness)

    Raises:
        TooManyCoefficients: 계수가 거듭제곱 개수보다 많을 때
        HidingBoundIsZero / HidingBoundTooLarge: 하이딩 한도가 잘못되었을 때
        MissingRng: 하이딩인데 rng가 없을 때
    """
    coeffs = polynomial.coeffs
    check_degree_is_within_bounds(len(coeffs), len(powers.powers_of_g), label)

    point = msm(powers.powers_of_g, coeffs)

    randomness = Randomness.empty()
    if hiding_bound is not None:
        check_hiding_bound(hiding_bound, len(powers.powers_of_gamma_g), label)
        if rng is None:
            raise MissingRng(label)
        randomness = Randomness.sample(hiding_bound, rng)
        random_point = msm(powers.powers_of_gamma_g, randomness.blinding_polynomial.coeffs)
        point = ec_add(point, random_point)

    return Commitment(point), randomness


def compute_witness_polynomial(polynomial, point, randomness):
    """몫 다항식 w(x)와 (하이딩이면) w_r(x)를 계산한다.

    Returns:
        tuple: (w, w_r 또는 None)
    """
    witness = divide_by_linear(polynomial, point)
    random_witness = None
    if randomness.is_hiding():
        random_witness = divide_by_linear(randomness.blinding_polynomial, point)
    return witness, random_witness


def open_with_witness_polynomial(powers, point, randomness, witness, random_witness):
    check_degree_is_within_bounds(len(witness.coeffs), len(powers.powers_of_g))
    w = msm(powers.powers_of_g, witness.coeffs)
    random_v = None
    if random_witness is not None:
        blinding_evaluation = randomness.blinding_polynomial.evaluate(point)
        w = ec_add(w, msm(powers.powers_of_gamma_g, random_witness.coeffs))
        random_v = blinding_evaluation
    return Proof(w, random_v)


def open(powers, polynomial, point, randomness):
    """p(point)에 대한 열기 증명을 생성한다."""
    if not isinstance(point, FR):
        point = FR(point)
    check_degree_is_within_bounds(len(polynomial.coeffs), len(powers.powers_of_g))
    witness, random_witness = compute_witness_polynomial(polynomial, point, randomness)
    return open_with_witness_polynomial(powers, point, randomness, witness, random_witness)


def check(vk, commitment_point, point, value, proof):
    """열기 증명을 검증한다.

    Args:
        vk: VerifierKey (또는 g, gamma_g, h, beta_h 속성을 가진 객체)
        commitment_point: 커밋먼트 G1 점
        point: 평가 점 z
        value: 주장하는 평가값 y
        proof: Proof

    Returns:
        bool: 페어링 등식 e(C - yG - vγG, H) == e(π, βH - zH) 성립 여부
    """
    if not isinstance(point, FR):
        point = FR(point)
    if not isinstance(value, FR):
        value = FR(value)

    inner = ec_sub(commitment_point, ec_mul(vk.g, value))
    if proof.random_v is not None:
        inner = ec_sub(inner, ec_mul(vk.gamma_g, proof.random_v))

    beta_minus_z_h = ec_sub(vk.beta_h, ec_mul(vk.h, point))
    lhs = ec_pairing(vk.h, inner)
    rhs = ec_pairing(beta_minus_z_h, proof.w)
    ok = lhs == rhs
    logger.debug("KZG10 pairing check at z=%d: %s", int(point), ok)
    return ok
