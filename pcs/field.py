"""
PCS 기반 모듈: 유한체(Finite Field) 및 타원곡선 연산
======================================================

이 모듈은 다항식 커밋먼트 스킴(PCS) 전체에서 사용되는 대수적 기반을 정의한다.

**유한체 FR**:
  bn128 타원곡선의 스칼라 필드. 다항식 계수, 평가 점, 블라인딩 값이
  모두 이 필드의 원소이다.

**타원곡선 연산**:
  KZG 커밋먼트와 검증을 위한 G1, G2 그룹 연산 및 페어링.

**바이트 인코딩**:
  커밋먼트/증명의 정규(canonical) 바이트 표현에 사용되는 고정 길이 코덱.
  - FR 원소: 32바이트 빅엔디안
  - G1 점: x‖y 각 32바이트 빅엔디안 (무한원점은 64바이트의 0)

사용 예시:
    >>> from pcs.field import FR, G1, ec_mul
    >>> a = FR(3)
    >>> P = ec_mul(G1, a)  # 3·G1
    >>> len(g1_to_bytes(P))  # 64
"""

import secrets

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import bn128


# ─────────────────────────────────────────────────────────────────────
# 유한체(Finite Field) FR
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소.

    py_ecc의 FQ 클래스를 상속하여 +, -, *, /, ** 등의 필드 연산을 제공한다.

    예시:
        >>> x = FR(3)
        >>> x * x          # FR(9)
        >>> FR(1) / FR(3)   # 3의 모듈러 역원
    """
    field_modulus = bn128.curve_order


# 곡선 위수 (필드 크기)
CURVE_ORDER = bn128.curve_order

# 직렬화 크기
FR_BYTES = 32
G1_BYTES = 64


def random_fr(rng=None):
    """FR 원소를 균일하게 샘플링한다.

    Args:
        rng: ``randrange``를 제공하는 난수 생성기 (``random.Random`` 등).
             None이면 ``secrets.SystemRandom()``을 사용한다.

    Returns:
        FR: [0, p) 범위의 임의 원소
    """
    if rng is None:
        rng = secrets.SystemRandom()
    return FR(rng.randrange(CURVE_ORDER))


# ─────────────────────────────────────────────────────────────────────
# 타원곡선 상수 및 연산
# ─────────────────────────────────────────────────────────────────────

# G1 그룹 생성자
G1 = bn128.G1

# G2 그룹 생성자
G2 = bn128.G2

# 영점 (point at infinity) - py_ecc에서 None으로 표현
Z1 = None


def ec_mul(point, scalar):
    """타원곡선 스칼라 곱셈: scalar · point.

    Args:
        point: G1 또는 G2 위의 점 (None이면 무한원점)
        scalar: 정수 또는 FR 원소
    """
    if isinstance(scalar, FQ):
        scalar = int(scalar)
    if point is Z1:
        return Z1
    return bn128.multiply(point, scalar % CURVE_ORDER)


def ec_add(p1, p2):
    """타원곡선 점 덧셈: p1 + p2. 무한원점(None)은 항등원으로 처리된다."""
    return bn128.add(p1, p2)


def ec_neg(point):
    """타원곡선 점의 역원: -point."""
    return bn128.neg(point)


def ec_sub(p1, p2):
    """타원곡선 점 뺄셈: p1 - p2."""
    return ec_add(p1, ec_neg(p2))


def ec_pairing(g2_point, g1_point):
    """쌍선형 페어링 e(G1, G2) → GT.

    주의:
        py_ecc.bn128.pairing의 인자 순서는 (G2, G1)이다.
    """
    return bn128.pairing(g2_point, g1_point)


def msm(bases, scalars):
    """다중 스칼라 곱셈 Σ scalars[i] · bases[i].

    0인 스칼라는 건너뛴다. 결과가 항등원이면 None을 반환한다.

    Raises:
        ValueError: bases가 scalars보다 짧을 때
    """
    if len(scalars) > len(bases):
        raise ValueError(
            f"스칼라 개수 {len(scalars)}가 기저 점 개수 {len(bases)}를 초과합니다"
        )
    result = Z1
    for base, scalar in zip(bases, scalars):
        if int(scalar) == 0:
            continue
        result = ec_add(result, ec_mul(base, scalar))
    return result


# ─────────────────────────────────────────────────────────────────────
# 바이트 코덱
# ─────────────────────────────────────────────────────────────────────

def fr_to_bytes(value):
    """FR → 32바이트 빅엔디안."""
    return (int(value) % CURVE_ORDER).to_bytes(FR_BYTES, "big")


def fr_from_bytes(data):
    """32바이트 빅엔디안 → FR."""
    return FR(int.from_bytes(data, "big"))


def g1_to_bytes(point):
    """G1 점 → 64바이트 (x‖y). 무한원점은 64바이트의 0."""
    if point is None:
        return b"\x00" * G1_BYTES
    x, y = point
    return int(x).to_bytes(32, "big") + int(y).to_bytes(32, "big")


def g1_from_bytes(data):
    """64바이트 → G1 점.

    Raises:
        ValueError: 길이가 64가 아니거나 곡선 위의 점이 아닐 때
    """
    if len(data) != G1_BYTES:
        raise ValueError(f"G1 점은 {G1_BYTES}바이트여야 합니다: {len(data)}")
    if data == b"\x00" * G1_BYTES:
        return None
    x = int.from_bytes(data[:32], "big")
    y = int.from_bytes(data[32:], "big")
    point = (bn128.FQ(x), bn128.FQ(y))
    if not bn128.is_on_curve(point, bn128.b):
        raise ValueError("G1 곡선 위의 점이 아닙니다")
    return point
