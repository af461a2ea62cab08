"""
열/게이트 레지스트리 (Constraint System)
========================================

회로의 "모양"을 선언하는 곳. 위트니스 값과 무관하게 회로마다 한 번 실행된다.

**열(Column)의 종류**:
  | 종류      | 의미                                   | equality 가능 |
  |-----------|----------------------------------------|---------------|
  | ADVICE    | 비공개 위트니스 값 (행마다 prover가 씀) | O             |
  | FIXED     | 행마다 정해진 공개 상수                 | X             |
  | INSTANCE  | 외부에서 주어지는 공개 입력             | O             |

**게이트(Gate)**:
  VirtualCells(meta)를 받아 다항식 리스트를 반환하는 함수로 선언한다.

    >>> cs = ConstraintSystem()
    >>> a, b, c = cs.advice_column("a"), cs.advice_column("b"), cs.advice_column("c")
    >>> s = cs.selector("s")
    >>> def mul(meta):
    ...     aa = meta.query_advice(a, Rotation.cur())
    ...     bb = meta.query_advice(b, Rotation.cur())
    ...     cc = meta.query_advice(c, Rotation.cur())
    ...     return [meta.query_selector(s) * (aa * bb - cc)]
    >>> cs.create_gate("mul", mul)

  게이트는 자신이 참조하는 셀렉터 중 하나라도 켜진 행에서 검사된다.
  s_add·(a + b - c) + s_mul·(a·b - c) 처럼 셀렉터마다 다른 항을 고르는
  게이트도, 꺼진 셀렉터의 항은 0이 되므로 그대로 평가된다.
  셀렉터가 하나도 없는 게이트는 region이 차지한 모든 행에서 검사된다
  (이때는 fixed 열의 계수가 게이트 종류를 고른다).

선언은 append-only이다. 잘못된 선언은 ConfigurationError로 즉시 실패한다.
"""

from dataclasses import dataclass, field
from enum import Enum

from zktrace.core.errors import ConfigurationError
from zktrace.core.expression import Expression, Query, Rotation, SelectorQuery


class ColumnKind(Enum):
    ADVICE = "advice"
    FIXED = "fixed"
    INSTANCE = "instance"


@dataclass(frozen=True)
class Column:
    """선언된 열. kind와 (종류별) index로 식별된다. name은 진단용이다."""
    kind: ColumnKind
    index: int
    name: str = field(default=None, compare=False)

    @property
    def label(self):
        return self.name or f"{self.kind.value}[{self.index}]"

    def __repr__(self):
        return f"Column({self.label})"


@dataclass(frozen=True)
class Cell:
    """트레이스의 한 칸 (column, row). 값이 아니라 주소이다."""
    column: Column
    row: int

    def __repr__(self):
        return f"Cell({self.column.label}, {self.row})"


@dataclass(frozen=True)
class Selector:
    """행마다 켜고 끄는 불리언 의사(pseudo) 열."""
    index: int
    name: str = field(default=None, compare=False)

    @property
    def label(self):
        return self.name or f"selector[{self.index}]"

    def enable(self, region, offset):
        """region의 offset 행에서 이 셀렉터를 켠다."""
        return region.enable_selector(self.label, self, offset)

    def __repr__(self):
        return f"Selector({self.label})"


class Gate:
    """이름 붙은 다항식 항등식 묶음.

    속성:
        name: 게이트 이름 (진단용)
        index: 선언 순서
        constraint_names: 각 다항식의 이름 (없으면 "")
        polynomials: Expression 리스트
        selectors: 참조하는 Selector 리스트
        queries: 참조하는 Query 리스트
    """

    def __init__(self, name, index, constraint_names, polynomials):
        self.name = name
        self.index = index
        self.constraint_names = list(constraint_names)
        self.polynomials = list(polynomials)
        self.selectors = []
        self.queries = []
        for poly in self.polynomials:
            for selector in poly.selectors():
                if selector not in self.selectors:
                    self.selectors.append(selector)
            for query in poly.queries():
                if query not in self.queries:
                    self.queries.append(query)

    def degree(self):
        return max(poly.degree() for poly in self.polynomials)

    def __repr__(self):
        return f"Gate({self.name!r}, {self.polynomials!r})"


class VirtualCells:
    """create_gate 콜백에 넘겨지는 쿼리 빌더."""

    def __init__(self, cs):
        self._cs = cs

    def query_advice(self, column, rotation=None):
        return self._query(column, ColumnKind.ADVICE, rotation)

    def query_fixed(self, column, rotation=None):
        return self._query(column, ColumnKind.FIXED, rotation)

    def query_instance(self, column, rotation=None):
        return self._query(column, ColumnKind.INSTANCE, rotation)

    def query_any(self, column, rotation=None):
        self._cs.check_column(column)
        return Query(column, rotation or Rotation.cur())

    def query_selector(self, selector):
        self._cs.check_selector(selector)
        return SelectorQuery(selector)

    def _query(self, column, kind, rotation):
        self._cs.check_column(column)
        if column.kind is not kind:
            raise ConfigurationError(
                f"{column.label} 은(는) {column.kind.value} 열이지만 "
                f"{kind.value} 쿼리로 사용되었습니다"
            )
        return Query(column, rotation or Rotation.cur())


class ConstraintSystem:
    """열, 셀렉터, 게이트, equality 설정의 레지스트리."""

    def __init__(self):
        self.columns = {kind: [] for kind in ColumnKind}
        self.selectors = []
        self.gates = []
        self.equality_columns = []

    # ── 열/셀렉터 선언 ──

    def _declare(self, kind, name):
        column = Column(kind, len(self.columns[kind]), name)
        self.columns[kind].append(column)
        return column

    def advice_column(self, name=None):
        """위트니스(advice) 열을 선언한다."""
        return self._declare(ColumnKind.ADVICE, name)

    def fixed_column(self, name=None):
        """고정(fixed) 열을 선언한다."""
        return self._declare(ColumnKind.FIXED, name)

    def instance_column(self, name=None):
        """공개 입력(instance) 열을 선언한다."""
        return self._declare(ColumnKind.INSTANCE, name)

    def selector(self, name=None):
        selector = Selector(len(self.selectors), name)
        self.selectors.append(selector)
        return selector

    @property
    def advice_columns(self):
        return list(self.columns[ColumnKind.ADVICE])

    @property
    def fixed_columns(self):
        return list(self.columns[ColumnKind.FIXED])

    @property
    def instance_columns(self):
        return list(self.columns[ColumnKind.INSTANCE])

    # ── 검사 ──

    def check_column(self, column):
        """column이 이 시스템에서 선언된 열인지 확인한다."""
        if not isinstance(column, Column):
            raise ConfigurationError(f"열이 아닙니다: {column!r}")
        declared = self.columns[column.kind]
        if column.index >= len(declared) or column.index < 0:
            raise ConfigurationError(f"선언되지 않은 열입니다: {column.label}")
        return column

    def check_selector(self, selector):
        if not isinstance(selector, Selector) or selector.index >= len(self.selectors):
            raise ConfigurationError(f"선언되지 않은 셀렉터입니다: {selector!r}")
        return selector

    def check_cell(self, cell):
        self.check_column(cell.column)
        return cell

    # ── equality (copy constraint 참여) ──

    def enable_equality(self, column):
        """column의 셀들이 copy constraint에 참여할 수 있게 한다.

        Raises:
            ConfigurationError: 선언되지 않은 열, fixed 열, 중복 설정
        """
        self.check_column(column)
        if column.kind is ColumnKind.FIXED:
            raise ConfigurationError(
                f"fixed 열 {column.label} 에는 equality를 켤 수 없습니다"
            )
        if column in self.equality_columns:
            raise ConfigurationError(
                f"{column.label} 의 equality는 이미 켜져 있습니다"
            )
        self.equality_columns.append(column)

    def is_equality_enabled(self, column):
        return column in self.equality_columns

    # ── 게이트 ──

    def create_gate(self, name, constraints):
        """게이트를 선언한다.

        Args:
            name: 게이트 이름
            constraints: VirtualCells → [Expression] 또는
                         [(constraint_name, Expression)] 을 반환하는 함수

        Returns:
            Gate

        Raises:
            ConfigurationError: 다항식이 없거나 Expression이 아닌 값이 반환됨
        """
        polys = constraints(VirtualCells(self))
        if isinstance(polys, Expression):
            polys = [polys]
        names = []
        exprs = []
        for item in polys or ():
            if isinstance(item, tuple):
                constraint_name, expr = item
            else:
                constraint_name, expr = "", item
            if not isinstance(expr, Expression):
                raise ConfigurationError(
                    f"게이트 '{name}' 의 제약이 Expression이 아닙니다: {expr!r}"
                )
            names.append(constraint_name)
            exprs.append(expr)
        if not exprs:
            raise ConfigurationError(f"게이트 '{name}' 에 제약이 없습니다")
        gate = Gate(name, len(self.gates), names, exprs)
        self.gates.append(gate)
        return gate

    def degree(self):
        """모든 게이트 중 최대 차수."""
        return max((gate.degree() for gate in self.gates), default=0)
