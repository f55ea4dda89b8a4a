"""
PCS 오류 분류 (Error taxonomy)
===============================

래퍼 타입(LabeledPolynomial, LabeledCommitment)은 어떤 검증도 하지 않는다.
레이블 중복, 차수 제한 위반, 하이딩 한도 초과 같은 오용은 구체 스킴이
입력을 처리하는 시점에 아래 예외로 보고한다.

모든 예외는 ``PCSError``(= ``ValueError``의 하위 클래스)를 상속하므로
``except ValueError``로도 잡을 수 있다.
"""


class PCSError(ValueError):
    """다항식 커밋먼트 스킴 오류의 기반 클래스."""


class DegreeIsZero(PCSError):
    def __init__(self):
        super().__init__("최대 차수 0으로는 파라미터를 생성할 수 없습니다")


class TrimmingDegreeTooLarge(PCSError):
    def __init__(self, supported_degree, max_degree):
        self.supported_degree = supported_degree
        self.max_degree = max_degree
        super().__init__(
            f"트리밍 차수 {supported_degree}가 범용 파라미터 최대 차수 {max_degree}를 초과합니다"
        )


class TooManyCoefficients(PCSError):
    def __init__(self, num_coefficients, num_powers, label=None):
        self.num_coefficients = num_coefficients
        self.num_powers = num_powers
        self.label = label
        super().__init__(
            f"다항식 {label!r}의 계수 {num_coefficients}개가 "
            f"커밋 키의 거듭제곱 {num_powers}개를 초과합니다"
        )


class UnsupportedDegreeBound(PCSError):
    def __init__(self, degree_bound, label=None):
        self.degree_bound = degree_bound
        self.label = label
        super().__init__(f"지원하지 않는 차수 제한입니다: {degree_bound} (다항식 {label!r})")


class IncorrectDegreeBound(PCSError):
    def __init__(self, poly_degree, degree_bound, supported_degree, label):
        self.poly_degree = poly_degree
        self.degree_bound = degree_bound
        self.supported_degree = supported_degree
        self.label = label
        super().__init__(
            f"다항식 {label!r}의 차수 {poly_degree}가 차수 제한 {degree_bound}을(를) "
            f"초과하거나 제한이 지원 차수 {supported_degree}보다 큽니다"
        )


class HidingBoundIsZero(PCSError):
    def __init__(self, label=None):
        self.label = label
        super().__init__(f"다항식 {label!r}의 하이딩 한도는 1 이상이어야 합니다")


class HidingBoundTooLarge(PCSError):
    def __init__(self, hiding_poly_degree, num_powers, label=None):
        self.hiding_poly_degree = hiding_poly_degree
        self.num_powers = num_powers
        self.label = label
        super().__init__(
            f"다항식 {label!r}의 블라인딩 다항식 차수 {hiding_poly_degree}에 "
            f"필요한 γ 거듭제곱이 부족합니다 (보유: {num_powers})"
        )


class MissingRng(PCSError):
    def __init__(self, label=None):
        self.label = label
        super().__init__(f"하이딩 다항식 {label!r}을(를) 커밋하려면 난수 생성기가 필요합니다")


class MissingRandomness(PCSError):
    def __init__(self, label):
        self.label = label
        super().__init__(f"다항식 {label!r}에 대한 랜덤니스가 없습니다")


class MissingPolynomial(PCSError):
    def __init__(self, label):
        self.label = label
        super().__init__(f"레이블 {label!r}의 다항식이 없습니다")


class MissingEvaluation(PCSError):
    def __init__(self, label):
        self.label = label
        super().__init__(f"레이블 {label!r}의 평가값이 없습니다")


class DuplicateLabel(PCSError):
    def __init__(self, label):
        self.label = label
        super().__init__(f"배치 안에서 레이블 {label!r}이(가) 중복되었습니다")
