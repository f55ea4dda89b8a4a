"""
PCS 공통 추상화: 능력 계약(capability contract)과 레이블 래퍼
================================================================

모든 다항식 커밋먼트 스킴(KZG, IPA 등)이 따라야 하는 최소 인터페이스와,
다중 다항식 배치 프로토콜에서 다항식/커밋먼트를 전달할 때 쓰는
메타데이터 래퍼 타입을 정의한다.

**능력 계약 (ABC)**:
  UniversalParams, CommitterKey, VerifierKey, Commitment, Randomness, Proof.
  제네릭 프로토콜 코드(예: SNARK 검증기)는 이 계약에만 의존하므로
  구체 스킴을 바꿔 끼워도 그대로 재사용된다.

**레이블 래퍼**:
  - LabeledPolynomial: 다항식 + (label, degree_bound, hiding_bound)
  - LabeledCommitment: 커밋먼트 + (label, degree_bound)

  래퍼는 아무것도 검증하지 않는다. 레이블 중복, 차수 제한 위반,
  하이딩 한도 초과는 구체 스킴이 검사한다 (``pcs.errors`` 참조).

사용 예시:
    >>> p = LabeledPolynomial.new_owned("a", Polynomial([1, 2, 3]), degree_bound=2)
    >>> p.evaluate(FR(1))  # FR(6)
    >>> p.coeffs           # 래핑된 다항식으로 위임
"""

import copy
import io
from abc import ABC, abstractmethod


# ─────────────────────────────────────────────────────────────────────
# 바이트 직렬화
# ─────────────────────────────────────────────────────────────────────

class ToBytes(ABC):
    """결정론적 바이트 인코딩을 갖는 값.

    구현체는 ``write``만 정의하면 된다. ``writer``는 ``write(bytes)``를
    제공하는 바이너리 스트림(``io.BytesIO``, 파일 등)이다.
    """

    @abstractmethod
    def write(self, writer):
        """정규 바이트 인코딩을 ``writer``에 쓴다."""

    def to_bytes(self):
        buf = io.BytesIO()
        self.write(buf)
        return buf.getvalue()

    def __bytes__(self):
        return self.to_bytes()


# ─────────────────────────────────────────────────────────────────────
# 능력 계약 (Capability contracts)
# ─────────────────────────────────────────────────────────────────────

class UniversalParams(ABC):
    """범용 공개 파라미터의 최소 인터페이스."""

    @property
    @abstractmethod
    def max_degree(self):
        """커밋 키가 지원할 수 있는 최대 차수."""

    def clone(self):
        return copy.deepcopy(self)


class CommitterKey(ABC):
    """커밋 키의 최소 인터페이스.

    ``max_degree``는 이 키를 유도한 범용 파라미터의 최대 차수,
    ``supported_degree``는 이 키 자체가 지원하는 차수이다
    (항상 ``supported_degree <= max_degree``). 하나의 범용 설정을 서로 다른
    차수로 트리밍하여 여러 키를 만들 수 있다.
    """

    @property
    @abstractmethod
    def max_degree(self):
        """원본 범용 파라미터의 최대 차수."""

    @property
    @abstractmethod
    def supported_degree(self):
        """이 키가 지원하는 최대 차수."""

    def clone(self):
        return copy.deepcopy(self)


class VerifierKey(ABC):
    """검증 키의 최소 인터페이스. 형태는 CommitterKey와 같다."""

    @property
    @abstractmethod
    def max_degree(self):
        """원본 범용 파라미터의 최대 차수."""

    @property
    @abstractmethod
    def supported_degree(self):
        """이 키가 지원하는 최대 차수."""

    def clone(self):
        return copy.deepcopy(self)


class Commitment(ToBytes):
    """커밋먼트의 최소 인터페이스."""

    @classmethod
    @abstractmethod
    def empty(cls):
        """영 다항식에 대한 비하이딩(non-hiding) 커밋먼트."""

    @abstractmethod
    def has_degree_bound(self):
        """차수 제한이 걸린 커밋먼트인지 여부."""

    @abstractmethod
    def size_in_bytes(self):
        """직렬화된 크기 (바이트)."""

    def clone(self):
        return copy.deepcopy(self)


class Randomness(ABC):
    """커밋먼트 랜덤니스(블라인딩 값)의 최소 인터페이스."""

    @classmethod
    @abstractmethod
    def empty(cls):
        """커밋먼트를 숨기지 않는 빈 랜덤니스."""

    @classmethod
    @abstractmethod
    def sample(cls, num_queries, rng):
        """커밋먼트용 랜덤니스를 샘플링한다.

        Args:
            num_queries: 커밋먼트가 열릴 평가 점의 개수.
                         이 횟수까지 통계적으로 하이딩을 보장해야 한다.
            rng: 엔트로피 소스. 동시 사용 시 스레드 안전성은 호출자 책임.
        """

    def clone(self):
        return copy.deepcopy(self)


class Proof(ToBytes):
    """평가 증명의 최소 인터페이스."""

    @abstractmethod
    def size_in_bytes(self):
        """직렬화된 크기 (바이트)."""

    def clone(self):
        return copy.deepcopy(self)


# ─────────────────────────────────────────────────────────────────────
# LabeledPolynomial
# ─────────────────────────────────────────────────────────────────────

class LabeledPolynomial:
    """차수 제한/하이딩 한도 정보를 함께 가진 다항식.

    하이딩 한도는 다항식이 열릴 최대 질의 횟수이며, 이 다항식의
    커밋먼트에 얼마나 많은 블라인딩을 넣을지를 결정한다.

    저장 방식은 두 가지 중 하나다:
      - 소유(owned): ``new_owned``로 생성. 다항식을 넘겨받아 이 래퍼만 참조한다.
      - 공유(borrowed): 생성자로 생성. 호출자가 소유한 다항식을 참조로 보관한다.
        참조 대상은 래퍼가 살아 있는 동안 변경되어서는 안 된다.
    두 방식 모두 읽기 동작은 동일하다.

    래핑된 다항식에 정의된 속성/메서드(``coeffs``, ``degree``, ``is_zero`` ...)는
    래퍼에서도 그대로 쓸 수 있다.

    속성:
        label: 호출자가 지정한 식별자 (배치 내 유일성은 호출자 책임)
        polynomial: 래핑된 다항식 (읽기 전용)
        degree_bound: 차수 제한 (None이면 스킴의 기본 최대 차수)
        hiding_bound: 하이딩 한도 (None이면 비하이딩)
    """

    def __init__(self, label, polynomial, degree_bound=None, hiding_bound=None):
        self._label = label
        self._polynomial = polynomial
        self._owned = False
        self._degree_bound = degree_bound
        self._hiding_bound = hiding_bound

    @classmethod
    def new_owned(cls, label, polynomial, degree_bound=None, hiding_bound=None):
        """``polynomial``을 넘겨받아 소유하는 래퍼를 생성한다."""
        labeled = cls(label, polynomial, degree_bound, hiding_bound)
        labeled._owned = True
        return labeled

    @property
    def label(self):
        return self._label

    @property
    def polynomial(self):
        return self._polynomial

    @property
    def is_owned(self):
        return self._owned

    def evaluate(self, point):
        """래핑된 다항식을 ``point``에서 평가한다."""
        return self._polynomial.evaluate(point)

    @property
    def degree_bound(self):
        return self._degree_bound

    @property
    def hiding_bound(self):
        return self._hiding_bound

    def is_hiding(self):
        return self._hiding_bound is not None

    def to_owned(self):
        """다항식을 복사해 소유하는 새 래퍼를 반환한다."""
        return LabeledPolynomial.new_owned(
            self._label,
            copy.deepcopy(self._polynomial),
            self._degree_bound,
            self._hiding_bound,
        )

    def clone(self):
        """독립적인 깊은 복사본. 공유 모드는 공유 참조를 유지한다."""
        if self._owned:
            return self.to_owned()
        return LabeledPolynomial(
            self._label, self._polynomial, self._degree_bound, self._hiding_bound
        )

    def __getattr__(self, name):
        # 비공개/특수 이름은 위임하지 않는다 (copy, pickle 안전)
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._polynomial, name)

    def __len__(self):
        return len(self._polynomial)

    def __getitem__(self, index):
        return self._polynomial[index]

    def __iter__(self):
        return iter(self._polynomial)

    def __repr__(self):
        return (
            f"LabeledPolynomial(label={self._label!r}, polynomial={self._polynomial!r}, "
            f"degree_bound={self._degree_bound}, hiding_bound={self._hiding_bound})"
        )


# ─────────────────────────────────────────────────────────────────────
# LabeledCommitment
# ─────────────────────────────────────────────────────────────────────

class LabeledCommitment(ToBytes):
    """차수 제한 정보를 함께 가진 커밋먼트.

    레이블은 커밋 대상 다항식의 레이블과 같아야 한다 (호출자 규약).
    바이트 직렬화는 래핑된 커밋먼트의 인코딩과 정확히 같다.
    레이블과 차수 제한은 직렬화되지 않는다.
    """

    def __init__(self, label, commitment, degree_bound=None):
        self._label = label
        self._commitment = commitment
        self._degree_bound = degree_bound

    @property
    def label(self):
        return self._label

    @property
    def commitment(self):
        return self._commitment

    @property
    def degree_bound(self):
        return self._degree_bound

    def write(self, writer):
        self._commitment.write(writer)

    def clone(self):
        return copy.deepcopy(self)

    def __eq__(self, other):
        if not isinstance(other, LabeledCommitment):
            return NotImplemented
        return (
            self._label == other._label
            and self._degree_bound == other._degree_bound
            and self._commitment == other._commitment
        )

    def __hash__(self):
        return hash((self._label, self._degree_bound, self.to_bytes()))

    def __repr__(self):
        return (
            f"LabeledCommitment(label={self._label!r}, commitment={self._commitment!r}, "
            f"degree_bound={self._degree_bound})"
        )
