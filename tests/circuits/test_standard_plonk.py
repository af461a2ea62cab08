"""
Standard PLONK gate circuit tests: x²·y² + constant

게이트 한 개(l·sl + r·sr + l·r·sm - o·so + sc)와 fixed 계수 열로
곱셈/덧셈 행을 쌓는 칩을 확인한다.
"""
import pytest

from zktrace.core.circuit import configure
from zktrace.core.constraint_system import Cell
from zktrace.core.field import FR
from zktrace.core.mock_prover import MockProver
from zktrace.circuits.standard_plonk import StandardPlonkCircuit


@pytest.fixture(scope="module")
def prover():
    return MockProver.run(4, StandardPlonkCircuit(x=5, y=9, constant=7), [7, 2032])


class TestStandardPlonkChip:
    def test_configure(self):
        cs = configure(StandardPlonkCircuit).cs
        assert [c.name for c in cs.advice_columns] == ["l", "r", "o"]
        assert [c.name for c in cs.fixed_columns] == ["sm", "sl", "sr", "so", "sc"]
        assert cs.selectors == []
        assert cs.gates[0].selectors == []
        assert cs.degree() == 3

    def test_coefficients(self, prover):
        config = prover.shape.config
        trace = prover.trace

        def coeffs(row):
            return tuple(
                int(trace.fixed_value(Cell(col, row)))
                for col in (config.sl, config.sr, config.sm, config.so, config.sc)
            )

        assert coeffs(0) == (0, 0, 1, 1, 0)
        assert coeffs(2) == (0, 0, 1, 1, 0)
        assert coeffs(3) == (1, 1, 0, 1, 0)

    def test_rows(self, prover):
        config = prover.shape.config
        trace = prover.trace
        rows = [
            tuple(int(trace.advice_value(Cell(col, row)).inner)
                  for col in (config.l, config.r, config.o))
            for row in range(4)
        ]
        assert rows == [(5, 5, 25), (9, 9, 81), (25, 81, 2025), (2025, 7, 2032)]
        assert trace.region_rows() == [0, 1, 2, 3]

    def test_copy_regions_take_no_rows(self, prover):
        names = [r.name for r in prover.trace.regions]
        assert names == ["multiply", "multiply", "multiply", "add"]
        assert len(prover.trace.ledger) == 5


class TestStandardPlonkCircuit:
    def test_satisfied(self, prover):
        assert prover.verify() == []

    def test_wrong_output(self):
        """[7, 2031] → 1번 인덱스의 InstanceMismatch 하나."""
        failures = MockProver.run(
            4, StandardPlonkCircuit(x=5, y=9, constant=7), [7, 2031]
        ).verify()
        assert len(failures) == 1
        assert failures[0].kind == "instance_mismatch"
        assert failures[0].index == 1
        assert (failures[0].expected, failures[0].found) == (2031, 2032)

    def test_wrong_constant(self):
        failures = MockProver.run(
            4, StandardPlonkCircuit(x=5, y=9, constant=7), [8, 2032]
        ).verify()
        assert [(f.kind, f.index) for f in failures] == [("instance_mismatch", 0)]

    def test_tampered_coefficient(self, prover):
        """행 3 의 입력을 바꾸면 게이트와 복사 제약이 함께 실패한다."""
        config = prover.shape.config
        tampered = prover.trace.with_advice(Cell(config.l, 3), 2024)
        failures = MockProver(prover.cs, tampered, [7, 2032]).verify()
        assert sorted(f.kind for f in failures) == ["copy_mismatch", "gate_not_satisfied"]
        gate_failure = next(f for f in failures if f.kind == "gate_not_satisfied")
        assert (gate_failure.gate, gate_failure.row, gate_failure.region) == ("mini plonk", 3, "add")

    def test_zero_constant(self):
        circuit = StandardPlonkCircuit(x=2, y=3, constant=0)
        assert MockProver.run(4, circuit, [0, 36]).verify() == []

    def test_without_witnesses_keeps_constant(self):
        dry = StandardPlonkCircuit(x=5, y=9, constant=7).without_witnesses()
        assert dry.constant == FR(7)
        assert not dry.x.is_known()
