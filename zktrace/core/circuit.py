"""
회로 기술자 (Circuit Descriptor)
================================

회로는 두 단계로 정의된다.

**1. configure (한 번, 위트니스 없이)**:
  ConstraintSystem에 열, 셀렉터, 게이트를 선언하고 config 객체를 돌려준다.

**2. synthesize (위트니스마다)**:
  config와 Layouter를 받아 region을 만들고 값을 채운다.

  | 단계       | 입력                 | 출력                    |
  |------------|----------------------|-------------------------|
  | configure  | ConstraintSystem     | config (열/셀렉터 묶음) |
  | synthesize | config, Layouter     | (트레이스가 채워짐)     |
  | validate   | Trace, 공개 입력     | 실패 리스트             |

without_witnesses()는 위트니스를 모두 unknown으로 바꾼 같은 모양의 회로를
돌려준다. 구조 검증(드라이런)은 이 회로로 같은 synthesize 경로를 실행한다.

사용 예시:
    >>> shape = configure(FactorCircuit)
    >>> trace = synthesize(shape, FactorCircuit(a=11, b=13), k=4)
    >>> validate(shape, trace, [143])   # []  (성공)
    >>> validate(shape, trace, [144])   # [InstanceMismatch(...)]
"""

from zktrace.core.constraint_system import ConstraintSystem
from zktrace.core.layouter import Layouter
from zktrace.core.trace import TraceAssembler


class Circuit:
    """회로의 기반 클래스. configure 와 synthesize 를 구현한다."""

    @classmethod
    def configure(cls, meta):
        """열/게이트를 선언하고 config를 반환한다.

        Args:
            meta: ConstraintSystem

        Returns:
            회로별 config 객체
        """
        raise NotImplementedError("서브클래스에서 구현하세요")

    def synthesize(self, config, layouter):
        """config 에 맞춰 layouter 로 트레이스를 채운다."""
        raise NotImplementedError("서브클래스에서 구현하세요")

    def without_witnesses(self):
        """위트니스가 모두 unknown인, 같은 모양의 회로."""
        raise NotImplementedError("서브클래스에서 구현하세요")


class CircuitShape:
    """configure 결과: ConstraintSystem + config."""

    def __init__(self, cs, config):
        self.cs = cs
        self.config = config

    def __repr__(self):
        return (
            f"CircuitShape(columns={sum(len(c) for c in self.cs.columns.values())}, "
            f"gates={[g.name for g in self.cs.gates]})"
        )


def configure(circuit):
    """회로(클래스 또는 인스턴스)의 configure를 실행한다.

    Returns:
        CircuitShape
    """
    cs = ConstraintSystem()
    config = circuit.configure(cs)
    return CircuitShape(cs, config)


def synthesize(shape, circuit, k, public_inputs=None):
    """shape 위에서 circuit 을 합성하여 Trace를 만든다.

    Args:
        shape: configure()의 결과
        circuit: Circuit 인스턴스 (위트니스 포함)
        k: 트레이스는 2^k 행
        public_inputs: assign_advice_from_instance 가 읽는 공개 입력 (선택)

    Returns:
        Trace

    Raises:
        ConfigurationError, AssignmentConflict, NotEnoughRowsAvailable
    """
    assembler = TraceAssembler(shape.cs, k, public_inputs)
    circuit.synthesize(shape.config, Layouter(assembler))
    return assembler.finish()


def validate(shape, trace, public_inputs):
    """trace 가 shape 의 모든 제약과 공개 입력을 만족하는지 검사한다.

    Returns:
        list[VerifyFailure]: 비어 있으면 성공
    """
    from zktrace.core.mock_prover import MockProver

    return MockProver(shape.cs, trace, public_inputs).verify()
