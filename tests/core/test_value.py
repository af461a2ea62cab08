"""
Foundation tests: field.py, value.py

FR 변환 규칙과 Value의 unknown 전파를 확인한다.
"""
import pytest

from zktrace.core.field import FR, CURVE_ORDER, ZERO, ONE, to_field, inverse
from zktrace.core.value import Value


# =====================================================================
# FR
# =====================================================================

class TestToField:
    def test_int(self):
        assert to_field(143) == FR(143)

    def test_negative_int_wraps(self):
        assert to_field(-1) == FR(CURVE_ORDER - 1)

    def test_fr_passthrough(self):
        x = FR(7)
        assert to_field(x) is x

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            to_field(True)

    def test_str_rejected(self):
        with pytest.raises(TypeError):
            to_field("5")

    def test_inverse(self):
        assert inverse(3) * FR(3) == ONE

    def test_inverse_of_zero_is_zero(self):
        assert inverse(0) == ZERO


# =====================================================================
# Value
# =====================================================================

class TestValueConstruction:
    def test_known_int_becomes_fr(self):
        v = Value.known(5)
        assert v.is_known()
        assert isinstance(v.inner, FR)
        assert v.inner == FR(5)

    def test_unknown(self):
        v = Value.unknown()
        assert not v.is_known()
        assert v.inner is None

    def test_of_none_is_unknown(self):
        assert not Value.of(None).is_known()

    def test_of_value_is_identity(self):
        v = Value.known(3)
        assert Value.of(v) is v

    def test_of_int(self):
        assert Value.of(9) == Value.known(9)

    def test_of_rejects_bool(self):
        with pytest.raises(TypeError):
            Value.of(False)

    def test_known_rejects_none(self):
        with pytest.raises(TypeError):
            Value.known(None)


class TestValueArithmetic:
    def test_add(self):
        assert Value.known(2) + Value.known(3) == Value.known(5)

    def test_sub_wraps(self):
        assert Value.known(2) - Value.known(3) == Value.known(CURVE_ORDER - 1)

    def test_mul(self):
        assert Value.known(11) * Value.known(13) == Value.known(143)

    def test_reflected_int(self):
        assert 3 + Value.known(4) == Value.known(7)
        assert 10 - Value.known(4) == Value.known(6)
        assert 2 * Value.known(21) == Value.known(42)

    def test_neg(self):
        assert -Value.known(1) == Value.known(CURVE_ORDER - 1)

    def test_square(self):
        assert Value.known(9).square() == Value.known(81)

    def test_invert(self):
        assert Value.known(3).invert() * Value.known(3) == Value.known(1)

    def test_invert_zero(self):
        assert Value.known(0).invert() == Value.known(0)


class TestUnknownPropagation:
    """unknown이 섞인 모든 연산의 결과는 unknown이다."""

    @pytest.mark.parametrize("op", [
        lambda a, b: a + b,
        lambda a, b: a - b,
        lambda a, b: a * b,
        lambda a, b: b * a,
    ])
    def test_binary(self, op):
        assert not op(Value.known(2), Value.unknown()).is_known()

    def test_neg(self):
        assert not (-Value.unknown()).is_known()

    def test_map(self):
        calls = []
        result = Value.unknown().map(lambda v: calls.append(v))
        assert not result.is_known()
        assert calls == []

    def test_zip(self):
        assert not Value.known(1).zip(Value.unknown()).is_known()

    def test_invert(self):
        assert not Value.unknown().invert().is_known()


class TestValueCombinators:
    def test_zip_then_map(self):
        product = Value.known(2).zip(Value.known(3)).map(lambda p: p[0] * p[1])
        assert product == Value.known(6)

    def test_map_to_tuple(self):
        row = Value.known(5).map(lambda x: (x, x, x * x))
        assert row.map(lambda r: r[2]) == Value.known(25)

    def test_tuple_equality(self):
        assert Value.known(4).map(lambda x: (x, x)) == Value.known(4).map(lambda x: (x, 4))


class TestValueEquality:
    def test_unknowns_equal(self):
        assert Value.unknown() == Value.unknown()

    def test_known_vs_unknown(self):
        assert Value.known(1) != Value.unknown()

    def test_different_values(self):
        assert Value.known(1) != Value.known(2)

    def test_not_hashable(self):
        with pytest.raises(TypeError):
            hash(Value.known(1))

    def test_repr(self):
        assert repr(Value.known(7)) == "Value(7)"
        assert repr(Value.unknown()) == "Value(unknown)"
