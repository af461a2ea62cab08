"""
예제 회로: 피보나치 점화식
==========================

f(i+2) = f(i+1) + f(i) 를 행마다 한 단계씩 계산한다.

  | row | a  | b  | c  | s |
  |-----|----|----|----|---|
  | 0   | 1  | 1  | 2  | 1 |
  | 1   | 1  | 2  | 3  | 1 |   a₁ ≡ b₀, b₁ ≡ c₀ (복사 제약)
  | 2   | 2  | 3  | 5  | 1 |   a₂ ≡ b₁, b₂ ≡ c₁
  | ... |    |    |    |   |
  | 7   | 21 | 34 | 55 | 1 |   c₇ == instance[0]

게이트 "add": s · (a + b - c) = 0

각 행은 이전 행의 b, c 를 새 셀에 다시 쓰고(copy_advice) 복사 제약 두 개를
등록한다. 값만 다시 쓰고 복사 제약을 빠뜨리면, 검증기는 중간 값 조작을
잡아낼 수 없다.

n 단계 (첫 행 포함 n 행)를 계산하면 마지막 c 는 수열 1, 1, 2, 3, ... 의
(n+2)번째 값이다. n = 8 → 55.
"""

from zktrace.core.circuit import Circuit
from zktrace.core.expression import Rotation
from zktrace.core.value import Value


class FiboConfig:
    """피보나치 칩의 열과 셀렉터."""

    def __init__(self, a, b, c, instance, s):
        self.a = a
        self.b = b
        self.c = c
        self.instance = instance
        self.s = s


class FiboChip:
    """덧셈 게이트 한 개로 피보나치 행을 쌓는 칩."""

    def __init__(self, config):
        self.config = config

    @classmethod
    def construct(cls, config):
        return cls(config)

    @staticmethod
    def configure(meta, advices, instance, s):
        """게이트와 equality를 선언한다.

        Args:
            meta: ConstraintSystem
            advices: [a, b, c] advice 열
            instance: 공개 입력 열
            s: 덧셈 셀렉터

        Returns:
            FiboConfig
        """
        a, b, c = advices

        meta.enable_equality(a)
        meta.enable_equality(b)
        meta.enable_equality(c)
        meta.enable_equality(instance)

        def add(v):
            aa = v.query_advice(a, Rotation.cur())
            bb = v.query_advice(b, Rotation.cur())
            cc = v.query_advice(c, Rotation.cur())
            s_add = v.query_selector(s)
            return [s_add * (aa + bb - cc)]

        meta.create_gate("add", add)

        return FiboConfig(a, b, c, instance, s)

    def load_first_row(self, layouter, a, b):
        """첫 행: f(0) = a, f(1) = b, f(2) = a + b.

        Returns:
            tuple: (a_cell, b_cell, c_cell)
        """
        config = self.config

        def first_row(region):
            config.s.enable(region, 0)
            a_cell = region.assign_advice("f(0)", config.a, 0, a)
            b_cell = region.assign_advice("f(1)", config.b, 0, b)
            c_cell = region.assign_advice("f(2)", config.c, 0, a_cell.value + b_cell.value)
            return a_cell, b_cell, c_cell

        return layouter.assign_region("first row", first_row)

    def load_row(self, layouter, prev_b, prev_c):
        """다음 행: a ← prev_b, b ← prev_c (복사 제약), c = a + b."""
        config = self.config

        def next_row(region):
            config.s.enable(region, 0)
            a_cell = prev_b.copy_advice("prev_b to a", region, config.a, 0)
            b_cell = prev_c.copy_advice("prev_c to b", region, config.b, 0)
            c_cell = region.assign_advice("a + b", config.c, 0, a_cell.value + b_cell.value)
            return a_cell, b_cell, c_cell

        return layouter.assign_region("next row", next_row)

    def expose_public(self, layouter, cell, row):
        layouter.constrain_instance(cell, self.config.instance, row)


class FiboCircuit(Circuit):
    """위트니스: 초기값 a, b. n 은 행(단계) 수로, 회로 모양의 일부이다."""

    def __init__(self, a=None, b=None, n=8):
        if n < 1:
            raise ValueError(f"n은 1 이상이어야 합니다: {n}")
        self.a = Value.of(a)
        self.b = Value.of(b)
        self.n = n

    def without_witnesses(self):
        return FiboCircuit(n=self.n)

    @classmethod
    def configure(cls, meta):
        a = meta.advice_column("a")
        b = meta.advice_column("b")
        c = meta.advice_column("c")
        instance = meta.instance_column("instance")
        s = meta.selector("s")
        return FiboChip.configure(meta, [a, b, c], instance, s)

    def synthesize(self, config, layouter):
        chip = FiboChip.construct(config)

        _, b, c = chip.load_first_row(layouter.namespace("first"), self.a, self.b)
        for _ in range(1, self.n):
            _, b, c = chip.load_row(layouter.namespace("next"), b, c)

        chip.expose_public(layouter.namespace("expose"), c, 0)
