"""
알 수도 있고 모를 수도 있는 값 (Value)
=======================================

회로 합성(synthesis)은 두 번 실행된다:
  1. 구조 검증용 드라이런 — 위트니스(witness) 없이, 모든 값이 "unknown"
  2. 실제 합성 — 위트니스 값이 채워진 상태

두 실행이 같은 코드 경로를 타도록, 셀에 쓰이는 모든 값은 Value로 감싼다.
Value는 FR 원소를 담거나(known), 아무것도 담지 않는다(unknown).

**unknown 전파 규칙**:
  unknown이 하나라도 섞인 산술 연산의 결과는 unknown이다.

    Value.known(2) + Value.known(3)   → Value.known(5)
    Value.known(2) * Value.unknown()  → Value.unknown()
    -Value.unknown()                  → Value.unknown()

map/zip으로 튜플 같은 임의의 값을 담을 수도 있다 (칩이 한 행의 (l, r, o)를
한꺼번에 계산할 때 사용).
"""

from zktrace.core.field import FR, to_field, inverse


_UNKNOWN = object()


class Value:
    """known 값 또는 unknown을 표현하는 불변 래퍼.

    예시:
        >>> x = Value.known(5)
        >>> (x * x).inner      # FR(25)
        >>> Value.unknown().is_known()   # False
    """

    __slots__ = ("_inner",)

    def __init__(self, inner=_UNKNOWN):
        if isinstance(inner, int) and not isinstance(inner, bool):
            inner = FR(inner)
        self._inner = inner

    @classmethod
    def known(cls, inner):
        """값을 담은 Value. 정수는 FR로 변환된다.

        Raises:
            TypeError: inner가 None (값이 없으면 unknown() 또는 of()를 쓴다)
        """
        if inner is None:
            raise TypeError("known 값은 None일 수 없습니다")
        return cls(inner)

    @classmethod
    def unknown(cls):
        """값이 없는 Value."""
        return cls()

    @classmethod
    def of(cls, value):
        """Value, FR, int 중 무엇이든 Value로 만든다."""
        if isinstance(value, Value):
            return value
        if value is None:
            return cls.unknown()
        return cls.known(to_field(value))

    def is_known(self):
        return self._inner is not _UNKNOWN

    @property
    def inner(self):
        """담긴 값. unknown이면 None."""
        if self._inner is _UNKNOWN:
            return None
        return self._inner

    def map(self, fn):
        """known이면 fn(inner)을 담은 Value, unknown이면 unknown."""
        if not self.is_known():
            return Value()
        return Value(fn(self._inner))

    def zip(self, other):
        """두 Value를 (a, b) 튜플 Value로 묶는다."""
        if not (self.is_known() and other.is_known()):
            return Value()
        return Value((self._inner, other._inner))

    def invert(self):
        """곱셈 역원. 0의 역원은 0이다."""
        return self.map(inverse)

    def square(self):
        return self * self

    def _combine(self, other, op):
        other = other if isinstance(other, Value) else Value.of(other)
        if not (self.is_known() and other.is_known()):
            return Value()
        return Value(op(self._inner, other._inner))

    def __add__(self, other):
        return self._combine(other, lambda a, b: a + b)

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        return self._combine(other, lambda a, b: a - b)

    def __rsub__(self, other):
        return Value.of(other).__sub__(self)

    def __mul__(self, other):
        return self._combine(other, lambda a, b: a * b)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __neg__(self):
        return self.map(lambda a: -a)

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        if self.is_known() != other.is_known():
            return False
        if not self.is_known():
            return True
        return _inner_equal(self._inner, other._inner)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        if not self.is_known():
            return "Value(unknown)"
        if isinstance(self._inner, FR):
            return f"Value({int(self._inner)})"
        return f"Value({self._inner!r})"


def _inner_equal(a, b):
    """FR은 int와 섞여도 비교되지만 다른 타입과의 비교는 TypeError를 낸다."""
    if isinstance(a, FR) or isinstance(b, FR):
        if not isinstance(a, (FR, int)) or not isinstance(b, (FR, int)):
            return False
        return to_field(a) == to_field(b)
    if isinstance(a, tuple) and isinstance(b, tuple):
        return len(a) == len(b) and all(_inner_equal(x, y) for x, y in zip(a, b))
    return a == b
