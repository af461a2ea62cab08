"""
트레이스 기반 모듈: 유한체(Finite Field)
========================================

이 모듈은 제약 빌더 전체에서 사용되는 스칼라 타입을 정의한다.

**유한체 FR**:
  bn128 타원곡선의 스칼라 필드 (scalar field). 트레이스의 모든 셀 값,
  게이트 다항식의 계수, 공개 입력(public input)이 이 필드의 원소이다.
  - 위수(order) p ≈ 2^254, 소수체(prime field)
  - 덧셈 항등원 FR(0), 곱셈 항등원 FR(1)
  - 0의 역원은 0으로 정의된다 (py_ecc의 inv0 관례)

사용 예시:
    >>> from zktrace.core.field import FR, to_field
    >>> a = FR(11)
    >>> b = FR(13)
    >>> a * b == FR(143)   # True
    >>> -FR(1) == FR(CURVE_ORDER - 1)   # True
"""

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import bn128


class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소.

    py_ecc의 FQ 클래스를 상속하여 +, -, *, /, **, 단항 - 연산을 제공한다.
    FR 원소는 불변(immutable)이며 모든 연산은 새 원소를 반환한다.

    주의:
        FQ는 __eq__만 정의하므로 FR 원소는 해시할 수 없다.
        딕셔너리 키가 필요하면 int(x)를 사용한다.

    예시:
        >>> x = FR(3)
        >>> x * x          # FR(9)
        >>> FR(1) / FR(3)   # 3의 모듈러 역원
    """
    field_modulus = bn128.curve_order


# 곡선 위수 (필드 크기)
CURVE_ORDER = bn128.curve_order

ZERO = FR(0)
ONE = FR(1)


def to_field(value):
    """정수 또는 FR을 FR로 변환한다.

    음수 정수는 모듈러 축약된다: to_field(-1) == FR(CURVE_ORDER - 1).

    Args:
        value: int 또는 FR

    Returns:
        FR

    Raises:
        TypeError: int/FR이 아닌 값 (bool 포함)
    """
    if isinstance(value, FR):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, FQ)):
        raise TypeError(f"필드 원소로 변환할 수 없는 값: {value!r}")
    return FR(int(value))


def inverse(value):
    """곱셈 역원 1/value. 0의 역원은 0이다."""
    return ONE / to_field(value)
