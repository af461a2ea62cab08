"""
게이트 다항식 표현식 (Expression)
=================================

게이트는 "현재 행(및 인접 행)의 셀 값들에 대한 다항식 = 0" 형태의 항등식이다.
이 모듈은 그 다항식을 표현하는 작은 대수(algebra)를 제공한다.

**구성 요소**:
  | 노드          | 의미                                  |
  |---------------|---------------------------------------|
  | Constant      | 필드 상수 c                           |
  | Query         | 열(column)의 상대 행(rotation) 값     |
  | SelectorQuery | 셀렉터의 현재 행 값 (0 또는 1)        |
  | Negated       | -e                                    |
  | Sum           | e₁ + e₂                               |
  | Product       | e₁ · e₂                               |
  | Scaled        | e · c (상수배)                        |

Python 연산자 +, -, *, 단항 -는 Expression, FR, int를 모두 받는다.

**예시: 곱셈 게이트** s · (a·b - c) = 0
    >>> s = meta.query_selector(selector)
    >>> a = meta.query_advice(col_a, Rotation.cur())
    >>> b = meta.query_advice(col_b, Rotation.cur())
    >>> c = meta.query_advice(col_c, Rotation.cur())
    >>> gate = s * (a * b - c)

평가(evaluate)는 리프 노드(Query, SelectorQuery)의 값을 resolve 콜백으로 받아
Value 산술로 계산한다. 따라서 unknown 셀이 섞이면 결과도 unknown이다.
"""

from zktrace.core.field import FR, to_field
from zktrace.core.value import Value


class Rotation:
    """현재 행으로부터의 상대 오프셋.

    Rotation.cur() = 0, Rotation.next() = +1, Rotation.prev() = -1.
    트레이스 끝을 넘어가면 행 번호는 n을 법으로 순환한다.
    """

    __slots__ = ("offset",)

    def __init__(self, offset=0):
        self.offset = int(offset)

    @classmethod
    def cur(cls):
        return cls(0)

    @classmethod
    def next(cls):
        return cls(1)

    @classmethod
    def prev(cls):
        return cls(-1)

    def __eq__(self, other):
        return isinstance(other, Rotation) and self.offset == other.offset

    def __hash__(self):
        return hash(("rotation", self.offset))

    def __repr__(self):
        return f"Rotation({self.offset})"


def as_expression(value):
    """Expression, FR, int를 Expression으로 변환한다."""
    if isinstance(value, Expression):
        return value
    return Constant(value)


class Expression:
    """다항식 표현식 트리의 기반 클래스."""

    def evaluate(self, resolve):
        """표현식을 평가한다.

        Args:
            resolve: Query 또는 SelectorQuery 노드를 받아
                     Value(또는 FR/int)를 반환하는 콜백

        Returns:
            Value: 평가 결과 (unknown 전파)
        """
        raise NotImplementedError

    def children(self):
        return ()

    def walk(self):
        """전위 순회로 모든 노드를 생성한다."""
        yield self
        for child in self.children():
            yield from child.walk()

    def queries(self):
        """표현식이 참조하는 Query 노드 리스트 (등장 순서, 중복 제거)."""
        seen = []
        for node in self.walk():
            if isinstance(node, Query) and node not in seen:
                seen.append(node)
        return seen

    def selectors(self):
        """표현식이 참조하는 셀렉터 리스트 (등장 순서, 중복 제거)."""
        seen = []
        for node in self.walk():
            if isinstance(node, SelectorQuery) and node.selector not in seen:
                seen.append(node.selector)
        return seen

    def degree(self):
        raise NotImplementedError

    # ── 연산자 ──

    def __add__(self, other):
        return Sum(self, as_expression(other))

    def __radd__(self, other):
        return Sum(as_expression(other), self)

    def __sub__(self, other):
        return Sum(self, Negated(as_expression(other)))

    def __rsub__(self, other):
        return Sum(as_expression(other), Negated(self))

    def __mul__(self, other):
        other = as_expression(other)
        if isinstance(other, Constant):
            return Scaled(self, other.value)
        return Product(self, other)

    def __rmul__(self, other):
        other = as_expression(other)
        if isinstance(other, Constant):
            return Scaled(self, other.value)
        return Product(other, self)

    def __neg__(self):
        return Negated(self)


class Constant(Expression):
    """필드 상수."""

    def __init__(self, value):
        self.value = to_field(value)

    def evaluate(self, resolve):
        return Value.known(self.value)

    def degree(self):
        return 0

    def __repr__(self):
        return str(int(self.value))


class Query(Expression):
    """열 column의 (현재 행 + rotation) 셀 값."""

    def __init__(self, column, rotation=None):
        self.column = column
        self.rotation = rotation if rotation is not None else Rotation.cur()

    def row_at(self, row, n):
        """기준 행 row에서 이 쿼리가 가리키는 실제 행 (n을 법으로 순환)."""
        return (row + self.rotation.offset) % n

    def evaluate(self, resolve):
        return Value.of(resolve(self))

    def degree(self):
        return 1

    def __eq__(self, other):
        return (
            isinstance(other, Query)
            and self.column == other.column
            and self.rotation == other.rotation
        )

    def __hash__(self):
        return hash((self.column, self.rotation))

    def __repr__(self):
        if self.rotation.offset == 0:
            return self.column.label
        return f"{self.column.label}[{self.rotation.offset:+d}]"


class SelectorQuery(Expression):
    """셀렉터의 현재 행 값: 활성화된 행이면 1, 아니면 0."""

    def __init__(self, selector):
        self.selector = selector

    def evaluate(self, resolve):
        return Value.of(resolve(self))

    def degree(self):
        return 1

    def __repr__(self):
        return self.selector.label


class Negated(Expression):

    def __init__(self, inner):
        self.inner = inner

    def children(self):
        return (self.inner,)

    def evaluate(self, resolve):
        return -self.inner.evaluate(resolve)

    def degree(self):
        return self.inner.degree()

    def __repr__(self):
        return f"-({self.inner!r})"


class Sum(Expression):

    def __init__(self, left, right):
        self.left = left
        self.right = right

    def children(self):
        return (self.left, self.right)

    def evaluate(self, resolve):
        return self.left.evaluate(resolve) + self.right.evaluate(resolve)

    def degree(self):
        return max(self.left.degree(), self.right.degree())

    def __repr__(self):
        if isinstance(self.right, Negated):
            return f"{self.left!r} - {self.right.inner!r}"
        return f"{self.left!r} + {self.right!r}"


class Product(Expression):

    def __init__(self, left, right):
        self.left = left
        self.right = right

    def children(self):
        return (self.left, self.right)

    def evaluate(self, resolve):
        return self.left.evaluate(resolve) * self.right.evaluate(resolve)

    def degree(self):
        return self.left.degree() + self.right.degree()

    def __repr__(self):
        return f"{_wrap(self.left)}·{_wrap(self.right)}"


class Scaled(Expression):

    def __init__(self, inner, factor):
        self.inner = inner
        self.factor = factor if isinstance(factor, FR) else to_field(factor)

    def children(self):
        return (self.inner,)

    def evaluate(self, resolve):
        return self.inner.evaluate(resolve) * self.factor

    def degree(self):
        return self.inner.degree()

    def __repr__(self):
        return f"{_wrap(self.inner)}·{int(self.factor)}"


def _wrap(expr):
    if isinstance(expr, (Sum, Negated)):
        return f"({expr!r})"
    return repr(expr)
