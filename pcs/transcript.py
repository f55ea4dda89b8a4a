"""
Fiat-Shamir 트랜스크립트
=========================

배치 열기(batch opening)의 결합 챌린지 ξ를 비대화식으로 도출한다.

Prover와 Verifier가 같은 레이블 커밋먼트들과 평가 점을 같은 순서로
흡수하면 같은 챌린지를 얻는다. 커밋먼트는 정규 바이트 인코딩으로
흡수되므로, 레이블을 바꿔도 커밋먼트 바이트는 변하지 않는다
(레이블은 별도의 도메인 분리 데이터로 추가된다).

사용 예시:
    >>> t = Transcript()
    >>> t.append_commitment(labeled_comm)
    >>> t.append_scalar(b"point", FR(7))
    >>> xi = t.challenge_scalar(b"opening_challenge")
"""

import hashlib

from pcs.field import FR, CURVE_ORDER, fr_to_bytes


class Transcript:
    """SHA-256 기반 Fiat-Shamir 트랜스크립트.

    속성:
        state: 현재까지 누적된 해시 입력 바이트열
    """

    def __init__(self, label=b"pcs"):
        self.state = bytearray()
        self.state.extend(label)

    def append_bytes(self, label, data):
        """길이 접두사와 함께 임의의 바이트열을 추가한다."""
        self.state.extend(label)
        self.state.extend(len(data).to_bytes(8, "big"))
        self.state.extend(data)

    def append_scalar(self, label, scalar):
        """FR 스칼라 값을 32바이트 빅엔디안으로 추가한다."""
        self.state.extend(label)
        self.state.extend(fr_to_bytes(scalar))

    def append_commitment(self, labeled_commitment):
        """레이블 커밋먼트를 추가한다.

        레이블(UTF-8)과 커밋먼트의 정규 바이트 인코딩을 차례로 흡수한다.
        """
        self.append_bytes(b"label", labeled_commitment.label.encode("utf-8"))
        self.append_bytes(b"commitment", labeled_commitment.to_bytes())

    def challenge_scalar(self, label):
        """현재 상태를 해싱하여 챌린지 스칼라를 생성한다.

        생성된 해시는 상태에 다시 추가되므로 연속 호출은 서로 다른 값을 낸다.
        """
        self.state.extend(label)
        h = hashlib.sha256(bytes(self.state)).digest()
        self.state.extend(h)
        return FR(int.from_bytes(h, "big") % CURVE_ORDER)
