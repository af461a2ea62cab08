"""
Instance Binder tests: instance.py
"""
import pytest

from zktrace.core.constraint_system import Cell, ConstraintSystem
from zktrace.core.errors import ConfigurationError
from zktrace.core.field import FR
from zktrace.core.instance import InstanceBinder, normalize_instance


@pytest.fixture
def one_column():
    cs = ConstraintSystem()
    cs.instance_column("pi")
    return cs


@pytest.fixture
def two_columns():
    cs = ConstraintSystem()
    cs.instance_column("x")
    cs.instance_column("y")
    return cs


class TestNormalizeInstance:
    def test_none(self, one_column):
        assert normalize_instance(one_column, None) is None

    def test_flat_for_single_column(self, one_column):
        assert normalize_instance(one_column, [7, 2032]) == [[FR(7), FR(2032)]]

    def test_nested_for_single_column(self, one_column):
        assert normalize_instance(one_column, [[143]]) == [[FR(143)]]

    def test_empty(self, two_columns):
        assert normalize_instance(two_columns, []) == [[], []]

    def test_nested_for_two_columns(self, two_columns):
        assert normalize_instance(two_columns, [[1], [2, 3]]) == [[FR(1)], [FR(2), FR(3)]]

    def test_flat_for_two_columns_rejected(self, two_columns):
        with pytest.raises(ConfigurationError):
            normalize_instance(two_columns, [1, 2])

    def test_column_count_mismatch(self, two_columns):
        with pytest.raises(ConfigurationError):
            normalize_instance(two_columns, [[1], [2], [3]])

    def test_mixed_shapes_rejected(self, one_column):
        with pytest.raises(ConfigurationError):
            normalize_instance(one_column, [1, [2]])
        with pytest.raises(ConfigurationError):
            normalize_instance(one_column, [[1], 2])

    def test_non_field_value(self, one_column):
        with pytest.raises(TypeError):
            normalize_instance(one_column, ["1"])


class TestInstanceBinder:
    @pytest.fixture
    def setup(self):
        cs = ConstraintSystem()
        a = cs.advice_column("a")
        pi = cs.instance_column("pi")
        return a, pi

    def test_bind_in_order(self, setup):
        a, pi = setup
        binder = InstanceBinder()
        first = binder.bind(Cell(a, 3), pi, 0)
        second = binder.bind(Cell(a, 5), pi, 1)
        assert list(binder) == [first, second]
        assert len(binder) == 2

    def test_same_index_many_cells(self, setup):
        a, pi = setup
        binder = InstanceBinder()
        binder.bind(Cell(a, 0), pi, 0)
        binder.bind(Cell(a, 1), pi, 0)
        binder.bind(Cell(a, 2), pi, 1)
        assert [b.cell.row for b in binder.for_index(pi, 0)] == [0, 1]

    def test_negative_index(self, setup):
        a, pi = setup
        with pytest.raises(ValueError):
            InstanceBinder().bind(Cell(a, 0), pi, -1)
