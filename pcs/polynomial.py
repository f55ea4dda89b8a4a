"""
PCS 기반 모듈: 다항식(Polynomial) 클래스
==========================================

계수(coefficient) 표현 기반의 밀집(dense) 다항식. p(x) = c₀ + c₁·x + c₂·x² + ...

**필드 일반화**:
  다항식은 특정 필드에 묶여 있지 않다. ``field`` 인자로 py_ecc ``FQ``
  계열의 필드 클래스를 지정하며, 기본값은 bn128 스칼라 필드 ``FR``이다.
  덧셈/곱셈/역원/항등원만 사용하므로 어떤 소수체 위에서도 동작한다.

**선형식 나눗셈 (divide_by_linear)**:
  KZG 열기 증명에서 (p(x) - p(z)) / (x - z) 계산에 사용된다.

사용 예시:
    >>> from pcs.polynomial import Polynomial
    >>> p = Polynomial([1, 2, 3])  # 1 + 2x + 3x²
    >>> p.evaluate(2)  # 1 + 4 + 12 = FR(17)
"""

import secrets

from pcs.field import FR


class Polynomial:
    """필드 위의 다항식.

    계수 리스트로 표현: coeffs = [c₀, c₁, c₂, ...] → c₀ + c₁x + c₂x² + ...
    모든 연산은 새 다항식을 반환하며 기존 객체를 변경하지 않는다.

    예시:
        >>> p = Polynomial([FR(1), FR(2)])  # 1 + 2x
        >>> q = Polynomial([FR(3), FR(4)])  # 3 + 4x
        >>> p * q                            # 3 + 10x + 8x²
    """

    def __init__(self, coeffs=None, field=FR):
        """다항식 생성.

        Args:
            coeffs: 필드 원소(또는 정수)의 리스트 [c₀, c₁, ...].
                    None이면 영 다항식(0)을 생성한다.
            field: 계수 필드 클래스 (기본값: FR)
        """
        self.field = field
        if coeffs is None:
            self.coeffs = [field(0)]
        else:
            self.coeffs = [c if isinstance(c, field) else field(c) for c in coeffs]
            if not self.coeffs:
                self.coeffs = [field(0)]
        self._trim()

    def _trim(self):
        """최고차 계수가 0인 항을 제거하여 정규화한다."""
        while len(self.coeffs) > 1 and self.coeffs[-1] == self.field(0):
            self.coeffs.pop()

    def _coerce(self, other):
        if isinstance(other, Polynomial):
            return other
        return Polynomial([other], field=self.field)

    @property
    def degree(self):
        """다항식의 차수. 영 다항식의 차수는 0으로 정의한다."""
        return len(self.coeffs) - 1

    def is_zero(self):
        """영 다항식인지 확인."""
        return len(self.coeffs) == 1 and self.coeffs[0] == self.field(0)

    def evaluate(self, point):
        """다항식을 주어진 점에서 평가한다 (Horner's method).

        예시:
            >>> Polynomial([1, 2, 3]).evaluate(FR(2))  # FR(17)
        """
        if not isinstance(point, self.field):
            point = self.field(point)
        result = self.field(0)
        for coeff in reversed(self.coeffs):
            result = result * point + coeff
        return result

    def __add__(self, other):
        other = self._coerce(other)
        max_len = max(len(self.coeffs), len(other.coeffs))
        zero = self.field(0)
        result = []
        for i in range(max_len):
            a = self.coeffs[i] if i < len(self.coeffs) else zero
            b = other.coeffs[i] if i < len(other.coeffs) else zero
            result.append(a + b)
        return Polynomial(result, field=self.field)

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        return self + (-self._coerce(other))

    def __rsub__(self, other):
        return self._coerce(other) - self

    def __neg__(self):
        zero = self.field(0)
        return Polynomial([zero - c for c in self.coeffs], field=self.field)

    def __mul__(self, other):
        """다항식 곱셈 (O(n²) 나이브) 또는 스칼라곱."""
        if not isinstance(other, Polynomial):
            scalar = other if isinstance(other, self.field) else self.field(other)
            return Polynomial([c * scalar for c in self.coeffs], field=self.field)
        result = [self.field(0)] * (len(self.coeffs) + len(other.coeffs) - 1)
        for i, a in enumerate(self.coeffs):
            for j, b in enumerate(other.coeffs):
                result[i + j] = result[i + j] + a * b
        return Polynomial(result, field=self.field)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __eq__(self, other):
        if not isinstance(other, Polynomial):
            try:
                other = self._coerce(other)
            except TypeError:
                return False
        if other.field.field_modulus != self.field.field_modulus:
            return False
        return [int(c) for c in self.coeffs] == [int(c) for c in other.coeffs]

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((self.field.field_modulus, tuple(int(c) for c in self.coeffs)))

    def __repr__(self):
        terms = []
        for i, c in enumerate(self.coeffs):
            if c == self.field(0):
                continue
            if i == 0:
                terms.append(str(int(c)))
            elif i == 1:
                terms.append(f"{int(c)}*x")
            else:
                terms.append(f"{int(c)}*x^{i}")
        return "Poly(" + " + ".join(terms) + ")" if terms else "Poly(0)"

    def __len__(self):
        """계수 개수 반환 (차수 + 1)."""
        return len(self.coeffs)

    def __getitem__(self, index):
        return self.coeffs[index]

    def __iter__(self):
        return iter(self.coeffs)

    def shift(self, k):
        """x^k · p(x)를 반환한다.

        차수 제한(degree bound) 강제에 쓰이는 시프트 다항식 생성에 사용된다.
        """
        if k < 0:
            raise ValueError(f"시프트 양은 음수일 수 없습니다: {k}")
        if self.is_zero():
            return Polynomial.zero(field=self.field)
        return Polynomial([self.field(0)] * k + list(self.coeffs), field=self.field)

    @classmethod
    def zero(cls, field=FR):
        """영 다항식 p(x) = 0."""
        return cls([field(0)], field=field)

    @classmethod
    def random(cls, degree, rng=None, field=FR):
        """``field`` 위의 차수 ``degree`` 임의 다항식 (최고차 계수는 0이 아님).

        Args:
            degree: 다항식 차수 (0 이상)
            rng: ``randrange``를 제공하는 난수 생성기.
                 None이면 ``secrets.SystemRandom()``을 사용한다.
            field: 계수 필드 클래스

        Raises:
            ValueError: degree가 음수일 때
        """
        if degree < 0:
            raise ValueError(f"다항식 차수는 음수일 수 없습니다: {degree}")
        if rng is None:
            rng = secrets.SystemRandom()
        modulus = field.field_modulus
        coeffs = [field(rng.randrange(modulus)) for _ in range(degree + 1)]
        while int(coeffs[-1]) == 0:
            coeffs[-1] = field(rng.randrange(modulus))
        return cls(coeffs, field=field)


# ─────────────────────────────────────────────────────────────────────
# 선형식으로 나누기
# ─────────────────────────────────────────────────────────────────────

def divide_by_linear(poly, point):
    """(p(x) - p(z)) / (x - z)를 합성 나눗셈(synthetic division)으로 계산한다.

    인수정리에 의해 항상 나누어 떨어지므로 몫만 반환한다.
    """
    field = poly.field
    if not isinstance(point, field):
        point = field(point)
    if poly.degree == 0:
        return Polynomial.zero(field=field)
    quotient = [field(0)] * poly.degree
    carry = field(0)
    for i in range(poly.degree, 0, -1):
        carry = carry * point + poly.coeffs[i]
        quotient[i - 1] = carry
    return Polynomial(quotient, field=field)


__all__ = ["Polynomial", "divide_by_linear"]
