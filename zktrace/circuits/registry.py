"""
예제 회로 레지스트리
====================

이름 → (위트니스 파라미터, 기본 k, 예제 입력, 회로 팩토리).
콘솔 데모(example.py)와 웹 엔드포인트(mock_routes.py)가 공유한다.

  | 이름           | 위트니스          | 기본 k | 예제 공개 입력 |
  |----------------|-------------------|--------|----------------|
  | factor         | a, b              | 4      | [143]          |
  | fibonacci      | a, b, n           | 4      | [55]           |
  | standard_plonk | x, y, constant    | 4      | [7, 2032]      |
  | cubic          | x, constant       | 4      | [35]           |
"""

from zktrace.circuits.cubic import CubicCircuit
from zktrace.circuits.factor import FactorCircuit
from zktrace.circuits.fibonacci import FiboCircuit
from zktrace.circuits.standard_plonk import StandardPlonkCircuit


class CircuitEntry:
    """레지스트리 항목.

    속성:
        name: 회로 이름
        description: 한 줄 설명
        circuit_cls: Circuit 서브클래스
        params: 위트니스 파라미터 이름 리스트
        default_k: 기본 트레이스 크기 지수
        example_witness: 만족하는 위트니스 예제
        example_public_inputs: example_witness 에 맞는 공개 입력
    """

    def __init__(self, name, description, circuit_cls, params, default_k,
                 example_witness, example_public_inputs):
        self.name = name
        self.description = description
        self.circuit_cls = circuit_cls
        self.params = list(params)
        self.default_k = default_k
        self.example_witness = dict(example_witness)
        self.example_public_inputs = list(example_public_inputs)

    def build(self, witness=None):
        """witness 딕셔너리로 회로를 만든다. 빠진 파라미터는 예제 값을 쓴다.

        Raises:
            ValueError: 알 수 없는 파라미터 또는 정수가 아닌 값
        """
        witness = dict(witness or {})
        unknown = sorted(set(witness) - set(self.params))
        if unknown:
            raise ValueError(f"'{self.name}' 회로에 없는 파라미터: {', '.join(unknown)}")
        kwargs = {}
        for param in self.params:
            kwargs[param] = parse_int(param, witness.get(param, self.example_witness[param]))
        return self.circuit_cls(**kwargs)


def parse_int(name, value):
    """int 또는 10진수 문자열을 int로 변환한다."""
    if isinstance(value, bool):
        raise ValueError(f"{name}: 정수가 필요합니다 ({value!r})")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip(), 10)
        except ValueError:
            pass
    raise ValueError(f"{name}: 정수가 필요합니다 ({value!r})")


CIRCUITS = {
    entry.name: entry
    for entry in [
        CircuitEntry(
            "factor", "a · b = c, c 공개", FactorCircuit,
            ["a", "b"], 4, {"a": 11, "b": 13}, [143],
        ),
        CircuitEntry(
            "fibonacci", "n 단계 피보나치, 마지막 값 공개", FiboCircuit,
            ["a", "b", "n"], 4, {"a": 1, "b": 1, "n": 8}, [55],
        ),
        CircuitEntry(
            "standard_plonk", "x²·y² + constant, constant 와 결과 공개", StandardPlonkCircuit,
            ["x", "y", "constant"], 4, {"x": 5, "y": 9, "constant": 7}, [7, 2032],
        ),
        CircuitEntry(
            "cubic", "x³ + x + constant, 결과 공개", CubicCircuit,
            ["x", "constant"], 4, {"x": 3, "constant": 5}, [35],
        ),
    ]
}


def get_circuit(name):
    """이름으로 레지스트리 항목을 찾는다. 없으면 KeyError."""
    return CIRCUITS[name]
