"""
검증기 (Mock Prover)
====================

다항식 커밋먼트나 페어링 없이, 채워진 트레이스가 모든 제약을 만족하는지
직접 확인한다. 실제 증명 시스템이 증명하려는 명제를 그대로 검사하는
"정답 판정기"이다.

**검증 단계** (실패는 모두 수집하며, 첫 실패에서 멈추지 않는다):

  1. 게이트: 각 게이트의 활성 행마다
       - 쿼리하는 advice 셀이 비어 있거나 unknown → UnassignedCell
       - 모든 다항식을 평가하여 0이 아니면 → GateNotSatisfied
     활성 행 = 게이트의 셀렉터 중 하나라도 켜진 행
              (셀렉터가 없는 게이트는 region이 차지한 모든 행)
  2. 복사 제약: 동치류마다 모든 셀 값이 같아야 함 → CopyMismatch
     (instance 셀은 검증 시점의 공개 입력 값을 사용)
  3. 공개 입력 바인딩: 셀 값 == public_inputs[index]
       → InstanceMismatch / InstanceIndexOutOfRange

**run()의 구조 검사**:
  run()은 회로를 두 번 합성한다. 한 번은 without_witnesses() (모든 값
  unknown), 한 번은 실제 위트니스로. 두 레이아웃(셀, 셀렉터, 복사 제약,
  바인딩, region)이 다르면 회로 기술이 비결정적이므로 ConfigurationError.

사용 예시:
    >>> prover = MockProver.run(4, FactorCircuit(a=11, b=13), [[143]])
    >>> prover.verify()             # []
    >>> prover.assert_satisfied()   # 실패가 있으면 ConstraintFailures
"""

import logging

from zktrace.core.circuit import configure, synthesize
from zktrace.core.constraint_system import Cell, ColumnKind
from zktrace.core.errors import (
    ConfigurationError,
    ConstraintFailures,
    NotEnoughRowsAvailable,
)
from zktrace.core.expression import SelectorQuery
from zktrace.core.failures import (
    CopyMismatch,
    GateNotSatisfied,
    InstanceIndexOutOfRange,
    InstanceMismatch,
    UnassignedCell,
)
from zktrace.core.field import ONE, ZERO
from zktrace.core.instance import normalize_instance


logger = logging.getLogger(__name__)


class MockProver:
    """트레이스 + 공개 입력에 대한 제약 검사기.

    속성:
        cs: ConstraintSystem
        trace: Trace
        instance: instance 열마다의 FR 리스트
    """

    def __init__(self, cs, trace, public_inputs):
        self.cs = cs
        self.trace = trace
        self.shape = None
        self.instance = normalize_instance(cs, public_inputs)
        for column, values in zip(cs.instance_columns, self.instance):
            if len(values) > trace.n:
                raise NotEnoughRowsAvailable(
                    trace.k,
                    message=(
                        f"{column.label} 의 공개 입력 {len(values)} 개가 "
                        f"k={trace.k} 트레이스({trace.n} 행)보다 많습니다"
                    ),
                )

    @classmethod
    def run(cls, k, circuit, instance):
        """circuit 을 구성/합성하고 검증 준비가 된 MockProver를 반환한다.

        Args:
            k: 트레이스 크기 지수 (2^k 행)
            circuit: Circuit 인스턴스
            instance: 공개 입력 (열마다의 리스트, 또는 열이 하나면 평평한 리스트)

        Raises:
            ConfigurationError: 드라이런과 실제 합성의 레이아웃이 다름
            AssignmentConflict, NotEnoughRowsAvailable: 회로 기술 오류
        """
        shape = configure(circuit)
        dry_run = synthesize(shape, circuit.without_witnesses(), k)
        trace = synthesize(shape, circuit, k, instance)
        if dry_run.layout() != trace.layout():
            raise ConfigurationError(
                "위트니스 없는 합성과 실제 합성의 레이아웃이 다릅니다 "
                "(행 배치가 위트니스 값에 의존합니다)"
            )
        prover = cls(shape.cs, trace, instance)
        prover.shape = shape
        return prover

    # ── 값 조회 ──

    def _instance_value(self, column, row):
        values = self.instance[column.index]
        if row >= len(values):
            return None
        return values[row]

    def _cell_value(self, cell):
        """셀의 FR 값. 비어 있거나 unknown이거나 공개 입력 범위 밖이면 None."""
        kind = cell.column.kind
        if kind is ColumnKind.ADVICE:
            value = self.trace.advice_value(cell)
            if value is None or not value.is_known():
                return None
            return value.inner
        if kind is ColumnKind.FIXED:
            return self.trace.fixed_value(cell)
        return self._instance_value(cell.column, cell.row)

    def _cell_failure(self, cell, context):
        """_cell_value 가 None 일 때 보고할 실패."""
        if cell.column.kind is ColumnKind.INSTANCE:
            return InstanceIndexOutOfRange(
                cell, cell.row, len(self.instance[cell.column.index]), cell.column
            )
        return UnassignedCell(cell, context, region=self.trace.region_at(cell.row))

    # ── 1. 게이트 ──

    def _active_rows(self, gate):
        if not gate.selectors:
            return self.trace.region_rows()
        rows = set().union(*(self.trace.enabled[s] for s in gate.selectors))
        return sorted(rows)

    def check_gates(self):
        failures = []
        n = self.trace.n
        for gate in self.cs.gates:
            rows = self._active_rows(gate)
            logger.debug("gate '%s': %d active rows", gate.name, len(rows))
            for row in rows:
                region = self.trace.region_at(row)
                values = {}
                missing = []
                for query in gate.queries:
                    cell = Cell(query.column, query.row_at(row, n))
                    if query.column.kind is ColumnKind.INSTANCE:
                        # 공개 입력 벡터 밖의 instance 행은 0으로 채워진 것으로 본다
                        value = self._instance_value(cell.column, cell.row)
                        values[query] = ZERO if value is None else value
                        continue
                    value = self._cell_value(cell)
                    if value is None:
                        missing.append(cell)
                    else:
                        values[query] = value
                if missing:
                    failures.extend(
                        UnassignedCell(cell, "gate", gate.name, row, region)
                        for cell in missing
                    )
                    continue

                def resolve(node, row=row, values=values):
                    if isinstance(node, SelectorQuery):
                        return ONE if self.trace.is_enabled(node.selector, row) else ZERO
                    return values[node]

                for index, poly in enumerate(gate.polynomials):
                    result = poly.evaluate(resolve)
                    if result.inner == ZERO:
                        continue
                    failures.append(GateNotSatisfied(
                        gate.name,
                        index,
                        row,
                        gate.constraint_names[index],
                        region,
                        tuple((repr(q), int(values[q])) for q in poly.queries()),
                    ))
        return failures

    # ── 2. 복사 제약 ──

    def check_copies(self):
        failures = []
        for group in self.trace.ledger.classes():
            values = []
            for cell in group:
                value = self._cell_value(cell)
                if value is None:
                    failures.append(self._cell_failure(cell, "copy"))
                    values.append(None)
                else:
                    values.append(int(value))
            known = {value for value in values if value is not None}
            if len(known) > 1:
                failures.append(CopyMismatch(tuple(group), tuple(values)))
        return failures

    # ── 3. 공개 입력 바인딩 ──

    def check_instances(self):
        failures = []
        for binding in self.trace.binder:
            column_values = self.instance[binding.column.index]
            if binding.index >= len(column_values):
                failures.append(InstanceIndexOutOfRange(
                    binding.cell, binding.index, len(column_values), binding.column
                ))
                continue
            found = self._cell_value(binding.cell)
            if found is None:
                failures.append(self._cell_failure(binding.cell, "instance"))
                continue
            expected = column_values[binding.index]
            if found != expected:
                failures.append(InstanceMismatch(
                    binding.cell, binding.index, int(expected), int(found), binding.column
                ))
        return failures

    # ── 종합 ──

    def verify(self):
        """모든 제약을 검사한다.

        Returns:
            list[VerifyFailure]: 비어 있으면 성공
        """
        failures = self.check_gates() + self.check_copies() + self.check_instances()
        logger.info(
            "mock prover: %d gates, %d copy classes, %d bindings -> %d failure(s)",
            len(self.cs.gates),
            len(self.trace.ledger.classes()),
            len(self.trace.binder),
            len(failures),
        )
        for failure in failures:
            logger.debug("  %s", failure)
        return failures

    def is_satisfied(self):
        return not self.verify()

    def assert_satisfied(self):
        """실패가 하나라도 있으면 ConstraintFailures를 던진다."""
        failures = self.verify()
        if failures:
            raise ConstraintFailures(failures)
