"""
pcs: 다항식 커밋먼트 스킴 공통 추상화
=======================================

  ┌──────────────────────────────────────────────────────────┐
  │  data_structures: 능력 계약 + LabeledPolynomial/Commitment │
  ├──────────────────────────────────────────────────────────┤
  │  kzg10:     단일 다항식 KZG 커밋/열기/검증                 │
  │  marlin_pc: 레이블 배치 + 차수 제한 + 하이딩               │
  ├──────────────────────────────────────────────────────────┤
  │  field / polynomial / transcript: 대수 기반               │
  └──────────────────────────────────────────────────────────┘
"""

import logging

from pcs.data_structures import (
    Commitment,
    CommitterKey,
    LabeledCommitment,
    LabeledPolynomial,
    Proof,
    Randomness,
    ToBytes,
    UniversalParams,
    VerifierKey,
)
from pcs.errors import PCSError
from pcs.field import FR
from pcs.marlin_pc import MarlinKZG10
from pcs.polynomial import Polynomial

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Commitment",
    "CommitterKey",
    "FR",
    "LabeledCommitment",
    "LabeledPolynomial",
    "MarlinKZG10",
    "PCSError",
    "Polynomial",
    "Proof",
    "Randomness",
    "ToBytes",
    "UniversalParams",
    "VerifierKey",
]
