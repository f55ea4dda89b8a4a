"""
PCS 데이터 직렬화/역직렬화 헬퍼
================================

TinyDB에 저장 가능한 형태(JSON)로 PCS 객체를 변환한다.
FR, G1, G2, Polynomial, LabeledPolynomial, 범용 파라미터, 커밋먼트, 랜덤니스, 증명.

커밋먼트와 증명은 정규 바이트 인코딩의 hex 문자열도 함께 저장한다.
"""

from py_ecc import bn128
from py_ecc.fields import bn128_FQ as FQ

from pcs import kzg10
from pcs.data_structures import LabeledCommitment, LabeledPolynomial
from pcs.field import FR
from pcs.marlin_pc import Commitment, Randomness
from pcs.polynomial import Polynomial


# ─── FR ───

def serialize_fr(val):
    """FR → str(int)"""
    return str(int(val))


def deserialize_fr(s):
    """str(int) → FR"""
    return FR(int(s))


# ─── G1 point ───

def serialize_g1(point):
    """G1 point → [str, str] or None"""
    if point is None:
        return None
    return [str(int(point[0])), str(int(point[1]))]


def deserialize_g1(data):
    """[str, str] or None → G1 point"""
    if data is None:
        return None
    return (FQ(int(data[0])), FQ(int(data[1])))


# ─── G2 point ───

def serialize_g2(point):
    """G2 point → [[str,str],[str,str]] or None"""
    if point is None:
        return None
    return [
        [str(int(point[0].coeffs[0])), str(int(point[0].coeffs[1]))],
        [str(int(point[1].coeffs[0])), str(int(point[1].coeffs[1]))]
    ]


def deserialize_g2(data):
    """[[str,str],[str,str]] or None → G2 point"""
    if data is None:
        return None
    return (
        bn128.FQ2([int(data[0][0]), int(data[0][1])]),
        bn128.FQ2([int(data[1][0]), int(data[1][1])])
    )


# ─── Polynomial ───

def serialize_poly(poly):
    """Polynomial → list of str (계수)"""
    if poly is None:
        return None
    return [str(int(c)) for c in poly.coeffs]


def deserialize_poly(data):
    """list of str → Polynomial"""
    if data is None:
        return None
    return Polynomial([FR(int(s)) for s in data])


def serialize_labeled_poly(labeled):
    """LabeledPolynomial → dict"""
    return {
        "label": labeled.label,
        "coeffs": serialize_poly(labeled.polynomial),
        "degree_bound": labeled.degree_bound,
        "hiding_bound": labeled.hiding_bound,
    }


def deserialize_labeled_poly(data):
    """dict → LabeledPolynomial (소유 모드)"""
    return LabeledPolynomial.new_owned(
        data["label"],
        deserialize_poly(data["coeffs"]),
        data.get("degree_bound"),
        data.get("hiding_bound"),
    )


# ─── Universal params ───

def serialize_params(pp):
    """kzg10.UniversalParams → dict"""
    return {
        "powers_of_g": [serialize_g1(p) for p in pp.powers_of_g],
        "powers_of_gamma_g": [serialize_g1(p) for p in pp.powers_of_gamma_g],
        "h": serialize_g2(pp.h),
        "beta_h": serialize_g2(pp.beta_h),
    }


def deserialize_params(data):
    """dict → kzg10.UniversalParams"""
    return kzg10.UniversalParams(
        [deserialize_g1(p) for p in data["powers_of_g"]],
        [deserialize_g1(p) for p in data["powers_of_gamma_g"]],
        deserialize_g2(data["h"]),
        deserialize_g2(data["beta_h"]),
    )


# ─── Commitment ───

def serialize_labeled_commitment(labeled):
    """LabeledCommitment → dict"""
    commitment = labeled.commitment
    shifted = commitment.shifted_comm
    return {
        "label": labeled.label,
        "degree_bound": labeled.degree_bound,
        "comm": serialize_g1(commitment.comm.point),
        "shifted_comm": serialize_g1(shifted.point) if shifted is not None else None,
        "has_shifted": shifted is not None,
        "bytes": labeled.to_bytes().hex(),
    }


def deserialize_labeled_commitment(data):
    """dict → LabeledCommitment (정규 바이트 인코딩에서 복원, 곡선 위 점인지 검사)"""
    commitment = Commitment.from_bytes(bytes.fromhex(data["bytes"]))
    return LabeledCommitment(data["label"], commitment, data.get("degree_bound"))


# ─── Randomness ───

def serialize_randomness(rand):
    """marlin_pc.Randomness → dict"""
    shifted = rand.shifted_rand
    return {
        "rand": serialize_poly(rand.rand.blinding_polynomial),
        "shifted_rand": serialize_poly(shifted.blinding_polynomial) if shifted is not None else None,
    }


def deserialize_randomness(data):
    """dict → marlin_pc.Randomness"""
    shifted = None
    if data.get("shifted_rand") is not None:
        shifted = kzg10.Randomness(deserialize_poly(data["shifted_rand"]))
    return Randomness(kzg10.Randomness(deserialize_poly(data["rand"])), shifted)


# ─── Proof ───

def serialize_proof(proof):
    """kzg10.Proof → dict"""
    return {
        "w": serialize_g1(proof.w),
        "random_v": serialize_fr(proof.random_v) if proof.random_v is not None else None,
        "bytes": proof.to_bytes().hex(),
    }


def deserialize_proof(data):
    """dict → kzg10.Proof (정규 바이트 인코딩에서 복원)"""
    return kzg10.Proof.from_bytes(bytes.fromhex(data["bytes"]))


# ─── display helpers ───

def g1_short(point):
    """G1 point → 축약 문자열 (UI 표시용)"""
    if point is None:
        return "∞"
    x_str = str(int(point[0]))
    y_str = str(int(point[1]))
    def shorten(s):
        if len(s) <= 8:
            return s
        return s[:4] + "..." + s[-4:]
    return f"({shorten(x_str)}, {shorten(y_str)})"
