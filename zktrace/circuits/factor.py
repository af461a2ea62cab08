"""
예제 회로: 인수분해 (a · b = c)
===============================

"공개된 c의 두 인수 a, b를 알고 있다"를 표현하는 한 행짜리 회로.

  | row | a  | b  | c   | s | instance |
  |-----|----|----|-----|---|----------|
  | 0   | 11 | 13 | 143 | 1 | 143      |

게이트 "mul": s · (a · b - c) = 0
공개 입력: c == instance[0]

c 는 별도의 위트니스가 아니라 a · b 로 계산되어 행 0에 쓰이고,
공개 입력 0번에 바인딩된다. 따라서 틀린 공개 입력은 InstanceMismatch로 잡힌다.
"""

from zktrace.core.circuit import Circuit
from zktrace.core.expression import Rotation
from zktrace.core.value import Value


class FactorConfig:
    """인수분해 회로의 열과 셀렉터."""

    def __init__(self, a, b, c, instance, s):
        self.a = a
        self.b = b
        self.c = c
        self.instance = instance
        self.s = s


class FactorCircuit(Circuit):
    """위트니스: a, b (정수, FR 또는 Value)."""

    def __init__(self, a=None, b=None):
        self.a = Value.of(a)
        self.b = Value.of(b)

    def without_witnesses(self):
        return FactorCircuit()

    @classmethod
    def configure(cls, meta):
        a = meta.advice_column("a")
        b = meta.advice_column("b")
        c = meta.advice_column("c")
        instance = meta.instance_column("instance")
        s = meta.selector("s")

        # 복사 제약/바인딩에 참여할 열
        meta.enable_equality(a)
        meta.enable_equality(b)
        meta.enable_equality(c)
        meta.enable_equality(instance)

        def mul(v):
            aa = v.query_advice(a, Rotation.cur())
            bb = v.query_advice(b, Rotation.cur())
            cc = v.query_advice(c, Rotation.cur())
            ss = v.query_selector(s)
            return [ss * (aa * bb - cc)]

        meta.create_gate("mul", mul)

        return FactorConfig(a, b, c, instance, s)

    def synthesize(self, config, layouter):
        def assign_row(region):
            config.s.enable(region, 0)
            a = region.assign_advice("load a", config.a, 0, self.a)
            b = region.assign_advice("load b", config.b, 0, self.b)
            return region.assign_advice("a * b", config.c, 0, a.value * b.value)

        c = layouter.assign_region("assign the row", assign_row)
        layouter.constrain_instance(c, config.instance, 0)
