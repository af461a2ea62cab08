"""
Fibonacci circuit tests

테스트 범위:
  - 8 단계 → 55
  - 행 사이의 값 전달에 복사 제약이 있을 때와 없을 때의 건전성 차이
  - namespace 가 붙은 region 이름
"""
import pytest

from zktrace.core.constraint_system import Cell
from zktrace.core.errors import NotEnoughRowsAvailable
from zktrace.core.mock_prover import MockProver
from zktrace.circuits.fibonacci import FiboChip, FiboCircuit


def fib_values(a, b, n):
    rows = []
    for _ in range(n):
        rows.append((a, b, a + b))
        a, b = b, a + b
    return rows


class UnconstrainedFiboChip(FiboChip):
    """이전 행의 값을 다시 쓰기만 하고 복사 제약은 등록하지 않는 칩."""

    def load_row(self, layouter, prev_b, prev_c):
        config = self.config

        def next_row(region):
            config.s.enable(region, 0)
            a_cell = region.assign_advice("a", config.a, 0, prev_b.value)
            b_cell = region.assign_advice("b", config.b, 0, prev_c.value)
            c_cell = region.assign_advice("c", config.c, 0, a_cell.value + b_cell.value)
            return a_cell, b_cell, c_cell

        return layouter.assign_region("next row", next_row)


class UnconstrainedFiboCircuit(FiboCircuit):
    def without_witnesses(self):
        return UnconstrainedFiboCircuit(n=self.n)

    def synthesize(self, config, layouter):
        chip = UnconstrainedFiboChip.construct(config)
        _, b, c = chip.load_first_row(layouter, self.a, self.b)
        for _ in range(1, self.n):
            _, b, c = chip.load_row(layouter, b, c)
        chip.expose_public(layouter, c, 0)


def forge(prover):
    """row 3 에서 a, c 를 함께 바꿔 게이트는 만족시키는 조작."""
    config = prover.shape.config
    return (
        prover.trace
        .with_advice(Cell(config.a, 3), 4)
        .with_advice(Cell(config.c, 3), 9)
    )


class TestFiboCircuit:
    def test_eight_steps(self):
        assert MockProver.run(4, FiboCircuit(a=1, b=1, n=8), [55]).verify() == []

    def test_trace_values(self):
        prover = MockProver.run(4, FiboCircuit(a=1, b=1, n=8), [55])
        config = prover.shape.config
        trace = prover.trace
        for row, expected in enumerate(fib_values(1, 1, 8)):
            actual = tuple(
                int(trace.advice_value(Cell(col, row)).inner)
                for col in (config.a, config.b, config.c)
            )
            assert actual == expected
        assert trace.enabled[config.s] == set(range(8))

    def test_copy_constraints_per_row(self):
        prover = MockProver.run(4, FiboCircuit(a=1, b=1, n=8), [55])
        assert len(prover.trace.ledger) == 2 * 7

    def test_wrong_output(self):
        failures = MockProver.run(4, FiboCircuit(a=1, b=1, n=8), [56]).verify()
        assert [(f.kind, f.index) for f in failures] == [("instance_mismatch", 0)]

    @pytest.mark.parametrize("a, b, n, out", [(1, 1, 1, 2), (2, 3, 4, 21), (0, 1, 10, 89)])
    def test_other_starts(self, a, b, n, out):
        assert MockProver.run(4, FiboCircuit(a=a, b=b, n=n), [out]).verify() == []

    def test_region_names(self):
        prover = MockProver.run(4, FiboCircuit(a=1, b=1, n=3), [5])
        names = [r.name for r in prover.trace.regions]
        assert names == ["first/first row", "next/next row", "next/next row"]

    def test_too_many_steps(self):
        with pytest.raises(NotEnoughRowsAvailable):
            MockProver.run(3, FiboCircuit(a=1, b=1, n=9), [89])

    def test_invalid_steps(self):
        with pytest.raises(ValueError):
            FiboCircuit(a=1, b=1, n=0)

    def test_without_witnesses_keeps_steps(self):
        dry = FiboCircuit(a=1, b=1, n=5).without_witnesses()
        assert dry.n == 5
        assert not dry.a.is_known()


class TestRowTransitions:
    """행 전달 값은 복사 제약이 있어야 조작을 잡을 수 있다."""

    def test_unconstrained_honest_run(self):
        prover = MockProver.run(4, UnconstrainedFiboCircuit(a=1, b=1), [55])
        assert prover.verify() == []
        assert len(prover.trace.ledger) == 0

    def test_unconstrained_forgery_passes(self):
        prover = MockProver.run(4, UnconstrainedFiboCircuit(a=1, b=1), [55])
        forged = forge(prover)
        assert MockProver(prover.cs, forged, [55]).verify() == []

    def test_constrained_forgery_caught(self):
        prover = MockProver.run(4, FiboCircuit(a=1, b=1), [55])
        forged = forge(prover)
        failures = MockProver(prover.cs, forged, [55]).verify()
        assert [f.kind for f in failures] == ["copy_mismatch", "copy_mismatch"]
