"""
Circuit registry tests: registry.py, example.py
"""
import pytest

from zktrace.core.mock_prover import MockProver
from zktrace.circuits import example
from zktrace.circuits.fibonacci import FiboCircuit
from zktrace.circuits.registry import CIRCUITS, get_circuit, parse_int


class TestRegistry:
    def test_names(self):
        assert list(CIRCUITS) == ["factor", "fibonacci", "standard_plonk", "cubic"]

    @pytest.mark.parametrize("name", ["factor", "fibonacci", "standard_plonk", "cubic"])
    def test_examples_satisfied(self, name):
        entry = get_circuit(name)
        circuit = entry.build(entry.example_witness)
        prover = MockProver.run(entry.default_k, circuit, entry.example_public_inputs)
        assert prover.verify() == []

    def test_unknown_name(self):
        with pytest.raises(KeyError):
            get_circuit("sha256")

    def test_build_from_strings(self):
        circuit = get_circuit("fibonacci").build({"a": "2", "b": "3", "n": "4"})
        assert isinstance(circuit, FiboCircuit)
        assert circuit.n == 4
        assert MockProver.run(4, circuit, [21]).verify() == []

    def test_missing_params_use_example(self):
        circuit = get_circuit("factor").build({"a": 2})
        assert MockProver.run(4, circuit, [26]).verify() == []

    def test_unknown_param(self):
        with pytest.raises(ValueError):
            get_circuit("factor").build({"c": 143})

    def test_bad_value(self):
        with pytest.raises(ValueError):
            get_circuit("cubic").build({"x": "three"})


class TestParseInt:
    def test_int(self):
        assert parse_int("x", 5) == 5

    def test_decimal_string(self):
        assert parse_int("x", " 42 ") == 42

    def test_negative_string(self):
        assert parse_int("x", "-1") == -1

    @pytest.mark.parametrize("value", [True, 1.5, None, "0x10", []])
    def test_rejected(self, value):
        with pytest.raises(ValueError):
            parse_int("x", value)


class TestExample:
    def test_demo_runs(self, capsys):
        assert example.main() is True
        out = capsys.readouterr().out
        assert "factor" in out
        assert "cubic" in out
