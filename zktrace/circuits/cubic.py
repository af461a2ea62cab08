"""
예제 회로: x³ + x + 5 = 35 (x = 3)
==================================

StandardPlonkChip 위에 쌓은 네 행짜리 회로.

  | row | l  | r | o  | 유형         | 복사 제약          |
  |-----|----|---|----|--------------|--------------------|
  | 0   | 3  | 3 | 9  | mul          | l₀ ≡ r₀            |
  | 1   | 9  | 3 | 27 | mul          | o₀ ≡ l₁, l₀ ≡ r₁   |
  | 2   | 27 | 3 | 30 | add          | o₁ ≡ l₂, l₀ ≡ r₂   |
  | 3   | 30 | 0 | 35 | add constant | o₂ ≡ l₃            |

  공개 입력: o₃ == instance[0] (= 35)

x 가 쓰인 네 셀 (l₀, r₀, r₁, r₂)은 하나의 동치류를 이룬다.
"""

from zktrace.core.circuit import Circuit
from zktrace.core.field import to_field
from zktrace.core.value import Value
from zktrace.circuits.standard_plonk import StandardPlonkChip


class CubicCircuit(Circuit):
    """위트니스: x. constant 는 sc 계수로 고정되는 회로 모양의 일부이다."""

    def __init__(self, x=None, constant=5):
        self.x = Value.of(x)
        self.constant = to_field(constant)

    def without_witnesses(self):
        return CubicCircuit(constant=self.constant)

    @classmethod
    def configure(cls, meta):
        return StandardPlonkChip.configure(meta)

    def synthesize(self, config, layouter):
        chip = StandardPlonkChip(config)

        # x · x = x²
        x0, x1, x2 = chip.raw_multiply(layouter, self.x.map(lambda x: (x, x, x * x)))
        chip.copy(layouter, x0, x1)

        # x² · x = x³
        a1, b1, x3 = chip.raw_multiply(
            layouter, x2.value.zip(x0.value).map(lambda p: (p[0], p[1], p[0] * p[1]))
        )
        chip.copy(layouter, x2, a1)
        chip.copy(layouter, x0, b1)

        # x³ + x
        a2, b2, sum_ = chip.raw_add(
            layouter, x3.value.zip(x0.value).map(lambda p: (p[0], p[1], p[0] + p[1]))
        )
        chip.copy(layouter, x3, a2)
        chip.copy(layouter, x0, b2)

        # (x³ + x) + constant
        a3, _, out = chip.add_constant(layouter, sum_.value, self.constant)
        chip.copy(layouter, sum_, a3)

        chip.expose_public(layouter, out, 0)
