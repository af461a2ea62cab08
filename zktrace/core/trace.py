"""
트레이스 (Trace) 와 트레이스 조립기 (Trace Assembler)
=====================================================

트레이스는 2^k 행 × (advice + fixed + instance) 열의 표이다.

  | row | a (advice) | b (advice) | c (advice) | s (selector) | pi (instance) |
  |-----|------------|------------|------------|--------------|---------------|
  | 0   | 11         | 13         | 143        | 1            | 143           |
  | 1   | -          | -          | -          | 0            | -             |

TraceAssembler는 Region이 스테이징한 할당을 커밋하면서 다음 불변식을 지킨다:
  - 셀은 한 번만 할당된다 (AssignmentConflict)
  - 행은 [0, 2^k) 범위 안에 있다 (NotEnoughRowsAvailable)
  - 복사 제약/공개 입력 바인딩은 선언된, equality가 켜진 열의 셀만 잇는다
    (ConfigurationError)

합성이 끝나면 finish()가 Trace를 돌려준다. Trace는 검증기(MockProver)가
읽는 최종 상태이며, layout()으로 구조(값 제외)를 비교할 수 있다.
"""

import logging

from zktrace.core.constraint_system import Cell, ColumnKind
from zktrace.core.errors import (
    AssignmentConflict,
    ConfigurationError,
    NotEnoughRowsAvailable,
)
from zktrace.core.field import ZERO
from zktrace.core.instance import InstanceBinder, normalize_instance
from zktrace.core.permutation import CopyConstraintLedger
from zktrace.core.value import Value


logger = logging.getLogger(__name__)


def cell_sort_key(cell):
    kinds = list(ColumnKind)
    return (kinds.index(cell.column.kind), cell.column.index, cell.row)


class RegionInfo:
    """커밋된 region의 위치 정보 (진단용 이름 + 행 범위 [start, end))."""

    def __init__(self, name, start, end):
        self.name = name
        self.start = start
        self.end = end

    def contains(self, row):
        return self.start <= row < self.end

    def __eq__(self, other):
        return (
            isinstance(other, RegionInfo)
            and (self.name, self.start, self.end) == (other.name, other.start, other.end)
        )

    def __repr__(self):
        return f"RegionInfo({self.name!r}, {self.start}, {self.end})"


class Trace:
    """합성이 끝난 트레이스.

    속성:
        cs: ConstraintSystem
        k: 트레이스 크기 지수 (n = 2^k 행)
        advice: Cell → Value
        fixed: Cell → FR (할당되지 않은 fixed 셀은 0)
        enabled: Selector → 켜진 행 집합
        ledger: CopyConstraintLedger
        binder: InstanceBinder
        regions: RegionInfo 리스트 (커밋 순서)
    """

    def __init__(self, cs, k):
        self.cs = cs
        self.k = k
        self.advice = {}
        self.fixed = {}
        self.enabled = {selector: set() for selector in cs.selectors}
        self.ledger = CopyConstraintLedger()
        self.binder = InstanceBinder()
        self.regions = []

    @property
    def n(self):
        return 1 << self.k

    def advice_value(self, cell):
        """할당된 Value, 할당되지 않았으면 None."""
        return self.advice.get(cell)

    def fixed_value(self, cell):
        return self.fixed.get(cell, ZERO)

    def is_enabled(self, selector, row):
        return row in self.enabled.get(selector, ())

    def region_at(self, row):
        """row를 차지한 region 이름 (마지막으로 커밋된 것), 없으면 None."""
        for info in reversed(self.regions):
            if info.contains(row):
                return info.name
        return None

    def region_rows(self):
        """region이 차지한 모든 행 (정렬됨)."""
        rows = set()
        for info in self.regions:
            rows.update(range(info.start, info.end))
        return sorted(rows)

    def layout(self):
        """값을 제외한 구조 서명.

        같은 회로를 (위트니스 유무와 관계없이) 두 번 합성하면 같아야 한다.
        """
        return (
            tuple(sorted(self.advice, key=cell_sort_key)),
            tuple(sorted(self.fixed, key=cell_sort_key)),
            tuple((s.index, tuple(sorted(rows))) for s, rows in self.enabled.items()),
            tuple(self.ledger.edges),
            tuple(self.binder.bindings),
            tuple((r.name, r.start, r.end) for r in self.regions),
        )

    def with_advice(self, cell, value):
        """cell 의 값만 바꾼 새 Trace. 건전성(soundness) 시연/테스트용.

        Raises:
            KeyError: cell 이 할당된 advice 셀이 아님
        """
        if cell not in self.advice:
            raise KeyError(cell)
        other = Trace(self.cs, self.k)
        other.advice = dict(self.advice)
        other.advice[cell] = Value.of(value)
        other.fixed = dict(self.fixed)
        other.enabled = {s: set(rows) for s, rows in self.enabled.items()}
        other.ledger = self.ledger.copy_of()
        other.binder.bindings = list(self.binder.bindings)
        other.regions = list(self.regions)
        return other

    def __repr__(self):
        return (
            f"Trace(k={self.k}, advice={len(self.advice)}, "
            f"copies={len(self.ledger)}, bindings={len(self.binder)})"
        )


class TraceAssembler:
    """Region 커밋을 받아 Trace를 채우는 조립기.

    Args:
        cs: ConstraintSystem
        k: 트레이스 크기 지수
        public_inputs: 합성 중 assign_advice_from_instance 가 읽을 공개 입력.
                       None이면 instance 값은 모두 unknown이다.
    """

    def __init__(self, cs, k, public_inputs=None):
        self.cs = cs
        self.trace = Trace(cs, k)
        self.instance = normalize_instance(cs, public_inputs)
        # 다음 region이 시작할 행
        self.next_row = 0

    @property
    def k(self):
        return self.trace.k

    # ── 검사 ──

    def check_row(self, row):
        if row < 0 or row >= self.trace.n:
            raise NotEnoughRowsAvailable(self.trace.k, row)

    def check_unassigned(self, cell, region=None, annotation=None):
        if cell in self.trace.advice or cell in self.trace.fixed:
            raise AssignmentConflict(cell, region, annotation)

    def check_equality(self, cell):
        """cell 이 복사 제약에 참여할 수 있는지 확인한다."""
        self.cs.check_cell(cell)
        if not self.cs.is_equality_enabled(cell.column):
            raise ConfigurationError(
                f"{cell.column.label} 열은 equality가 켜져 있지 않아 "
                f"복사 제약에 쓸 수 없습니다"
            )

    # ── instance 읽기 ──

    def instance_value(self, column, row):
        """합성 시점의 공개 입력 값. 모르거나 범위 밖이면 unknown."""
        self.cs.check_column(column)
        if column.kind is not ColumnKind.INSTANCE:
            raise ConfigurationError(f"{column.label} 은(는) instance 열이 아닙니다")
        if self.instance is None:
            return Value.unknown()
        values = self.instance[column.index]
        if row >= len(values):
            return Value.unknown()
        return Value.known(values[row])

    # ── 커밋 ──

    def commit(self, region):
        """Region에 스테이징된 모든 변경을 한꺼번에 반영한다."""
        trace = self.trace
        for cell, value in region.staged_advice.items():
            trace.advice[cell] = value
        for cell, value in region.staged_fixed.items():
            trace.fixed[cell] = value
        for selector, row in region.staged_selectors:
            trace.enabled[selector].add(row)
        trace.ledger.extend(region.staged_copies)
        if region.height:
            info = RegionInfo(region.name, region.start, region.start + region.height)
            trace.regions.append(info)
            self.next_row = max(self.next_row, info.end)
        logger.debug(
            "region '%s' committed: rows %d..%d, %d cells, %d copies",
            region.name, region.start, region.start + region.height,
            len(region.staged_advice) + len(region.staged_fixed),
            len(region.staged_copies),
        )

    def copy(self, left, right):
        """region 밖에서 복사 제약을 직접 등록한다."""
        self.check_equality(left)
        self.check_equality(right)
        self.trace.ledger.copy(left, right)

    def bind_instance(self, cell, column, index):
        """cell == public_inputs[column][index] 바인딩 (검사는 검증 시점)."""
        self.check_equality(cell)
        self.cs.check_column(column)
        if column.kind is not ColumnKind.INSTANCE:
            raise ConfigurationError(f"{column.label} 은(는) instance 열이 아닙니다")
        if index < 0:
            raise ConfigurationError(f"공개 입력 인덱스는 음수일 수 없습니다: {index}")
        self.check_equality(Cell(column, index))
        return self.trace.binder.bind(cell, column, index)

    def finish(self):
        return self.trace
