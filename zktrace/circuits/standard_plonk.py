"""
예제 회로: 미니 범용 회로 (Standard PLONK gate)
===============================================

게이트 하나로 곱셈, 덧셈, 상수 덧셈을 모두 표현한다:

    l·sl + r·sr + l·r·sm - o·so + sc = 0

sl, sr, sm, so, sc 는 fixed 열(행마다 정해진 계수)이다. 셀렉터 열이 따로
없으므로 게이트는 region이 차지한 모든 행에서 검사되며, 계수가 그 행의
연산 종류를 고른다.

**행 유형별 계수**:
  | 유형      | sl | sr | sm | so | sc | 의미         |
  |-----------|----|----|----|----|----|--------------|
  | 곱셈      | 0  | 0  | 1  | 1  | 0  | l·r = o      |
  | 덧셈      | 1  | 1  | 0  | 1  | 0  | l + r = o    |
  | 상수 덧셈 | 1  | 0  | 0  | 1  | k  | l + k = o    |

**예제**: x²·y² + constant (x = 5, y = 9, constant = 7)
  | row | l    | r  | o    | 유형 | 복사 제약          |
  |-----|------|----|------|------|--------------------|
  | 0   | 5    | 5  | 25   | mul  | l₀ ≡ r₀            |
  | 1   | 9    | 9  | 81   | mul  | l₁ ≡ r₁            |
  | 2   | 25   | 81 | 2025 | mul  | o₀ ≡ l₂, o₁ ≡ r₂   |
  | 3   | 2025 | 7  | 2032 | add  | o₂ ≡ l₃            |

  공개 입력: r₃ == instance[0] (= 7), o₃ == instance[1] (= 2032)

행과 행 사이의 모든 값 전달은 명시적인 복사 제약으로 등록된다.
"""

from zktrace.core.circuit import Circuit
from zktrace.core.expression import Rotation
from zktrace.core.field import ONE, to_field
from zktrace.core.value import Value


class StandardPlonkConfig:
    """세 개의 advice 열, 다섯 개의 계수(fixed) 열, 공개 입력 열."""

    def __init__(self, l, r, o, sl, sr, so, sm, sc, pi):
        self.l = l
        self.r = r
        self.o = o
        self.sl = sl
        self.sr = sr
        self.so = so
        self.sm = sm
        self.sc = sc
        self.pi = pi


class StandardPlonkChip:
    """범용 게이트 한 개로 행 단위 산술을 쌓는 칩."""

    def __init__(self, config):
        self.config = config

    @staticmethod
    def configure(meta):
        l = meta.advice_column("l")
        r = meta.advice_column("r")
        o = meta.advice_column("o")

        meta.enable_equality(l)
        meta.enable_equality(r)
        meta.enable_equality(o)

        sm = meta.fixed_column("sm")
        sl = meta.fixed_column("sl")
        sr = meta.fixed_column("sr")
        so = meta.fixed_column("so")
        sc = meta.fixed_column("sc")

        pi = meta.instance_column("pi")
        meta.enable_equality(pi)

        def mini_plonk(v):
            ll = v.query_advice(l, Rotation.cur())
            rr = v.query_advice(r, Rotation.cur())
            oo = v.query_advice(o, Rotation.cur())

            qsl = v.query_fixed(sl, Rotation.cur())
            qsr = v.query_fixed(sr, Rotation.cur())
            qso = v.query_fixed(so, Rotation.cur())
            qsm = v.query_fixed(sm, Rotation.cur())
            qsc = v.query_fixed(sc, Rotation.cur())

            return [ll * qsl + rr * qsr + ll * rr * qsm - oo * qso + qsc]

        meta.create_gate("mini plonk", mini_plonk)

        return StandardPlonkConfig(l, r, o, sl, sr, so, sm, sc, pi)

    def _row(self, layouter, name, values, coefficients):
        """한 행에 (l, r, o) 와 계수들을 쓴다.

        Args:
            values: (l, r, o) 튜플을 담은 Value
            coefficients: fixed 열 → 계수 딕셔너리 (나머지 계수는 0)
        """
        config = self.config

        def assign(region):
            lhs = region.assign_advice("lhs", config.l, 0, values.map(lambda v: v[0]))
            rhs = region.assign_advice("rhs", config.r, 0, values.map(lambda v: v[1]))
            out = region.assign_advice("out", config.o, 0, values.map(lambda v: v[2]))
            for column, coefficient in coefficients:
                region.assign_fixed(column.label, column, 0, coefficient)
            return lhs, rhs, out

        return layouter.assign_region(name, assign)

    def raw_multiply(self, layouter, values):
        """l · r = o 행. values 는 (l, r, o) 를 담은 Value."""
        config = self.config
        return self._row(layouter, "multiply", values, [(config.sm, ONE), (config.so, ONE)])

    def raw_add(self, layouter, values):
        """l + r = o 행."""
        config = self.config
        return self._row(
            layouter, "add", values, [(config.sl, ONE), (config.sr, ONE), (config.so, ONE)]
        )

    def add_constant(self, layouter, value, constant):
        """l + constant = o 행. r 에는 0이 쓰인다.

        Args:
            value: l 의 Value
            constant: sc 열에 고정될 상수
        """
        config = self.config
        constant = to_field(constant)
        values = value.map(lambda v: (v, to_field(0), v + constant))
        return self._row(
            layouter, "add constant", values,
            [(config.sl, ONE), (config.so, ONE), (config.sc, constant)],
        )

    def copy(self, layouter, a, b):
        """a ≡ b 복사 제약만 담은 region (행을 차지하지 않는다)."""
        layouter.assign_region("copy", lambda region: region.constrain_equal(a, b))

    def expose_public(self, layouter, cell, row):
        layouter.constrain_instance(cell, self.config.pi, row)


class StandardPlonkCircuit(Circuit):
    """x²·y² + constant 를 계산하고 constant 와 결과를 공개한다.

    위트니스: x, y. constant 는 공개 값이므로 위트니스 없이도 유지된다.
    """

    def __init__(self, x=None, y=None, constant=0):
        self.x = Value.of(x)
        self.y = Value.of(y)
        self.constant = to_field(constant)

    def without_witnesses(self):
        return StandardPlonkCircuit(constant=self.constant)

    @classmethod
    def configure(cls, meta):
        return StandardPlonkChip.configure(meta)

    def synthesize(self, config, layouter):
        chip = StandardPlonkChip(config)
        constant = self.constant

        # x²
        a0, b0, c0 = chip.raw_multiply(layouter, self.x.map(lambda x: (x, x, x * x)))
        chip.copy(layouter, a0, b0)

        # y²
        a1, b1, c1 = chip.raw_multiply(layouter, self.y.map(lambda y: (y, y, y * y)))
        chip.copy(layouter, a1, b1)

        # x² · y²
        a2, b2, c2 = chip.raw_multiply(
            layouter, c0.value.zip(c1.value).map(lambda p: (p[0], p[1], p[0] * p[1]))
        )
        chip.copy(layouter, c0, a2)
        chip.copy(layouter, c1, b2)

        # x² · y² + constant
        a3, b3, c3 = chip.raw_add(
            layouter, c2.value.map(lambda v: (v, constant, v + constant))
        )
        chip.copy(layouter, c2, a3)

        chip.expose_public(layouter, b3, 0)
        layouter.constrain_instance(c3, config.pi, 1)
