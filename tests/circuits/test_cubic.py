"""
Cubic circuit tests: x³ + x + 5 = 35
"""
import pytest

from zktrace.core.constraint_system import Cell
from zktrace.core.mock_prover import MockProver
from zktrace.circuits.cubic import CubicCircuit


@pytest.fixture(scope="module")
def prover():
    return MockProver.run(4, CubicCircuit(x=3), [35])


class TestCubicCircuit:
    def test_satisfied(self, prover):
        assert prover.verify() == []

    def test_rows(self, prover):
        config = prover.shape.config
        rows = [
            tuple(int(prover.trace.advice_value(Cell(col, row)).inner)
                  for col in (config.l, config.r, config.o))
            for row in range(4)
        ]
        assert rows == [(3, 3, 9), (9, 3, 27), (27, 3, 30), (30, 0, 35)]

    def test_add_constant_row(self, prover):
        config = prover.shape.config
        assert int(prover.trace.fixed_value(Cell(config.sc, 3))) == 5
        assert int(prover.trace.fixed_value(Cell(config.sr, 3))) == 0

    def test_x_equivalence_class(self, prover):
        config = prover.shape.config
        classes = prover.trace.ledger.classes()
        x_class = next(group for group in classes if Cell(config.l, 0) in group)
        assert set(x_class) == {
            Cell(config.l, 0), Cell(config.r, 0), Cell(config.r, 1), Cell(config.r, 2)
        }

    def test_wrong_output(self):
        failures = MockProver.run(4, CubicCircuit(x=3), [36]).verify()
        assert [(f.kind, f.index) for f in failures] == [("instance_mismatch", 0)]

    def test_other_constant(self):
        assert MockProver.run(4, CubicCircuit(x=2, constant=1), [11]).verify() == []

    def test_tampered_x_copy(self, prover):
        config = prover.shape.config
        tampered = prover.trace.with_advice(Cell(config.r, 1), 4)
        failures = MockProver(prover.cs, tampered, [35]).verify()
        assert sorted(f.kind for f in failures) == ["copy_mismatch", "gate_not_satisfied"]
