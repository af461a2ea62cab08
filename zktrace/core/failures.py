"""
검증 실패 (Verify Failures)
===========================

MockProver.verify()가 수집하는 의미적 위반들. 예외가 아니라 값이다.
검증은 첫 위반에서 멈추지 않고 모든 위반을 한 번에 보고한다.

  | 실패                    | 의미                                         |
  |-------------------------|----------------------------------------------|
  | UnassignedCell          | 활성 게이트/복사 제약/바인딩이 빈 셀을 참조  |
  | GateNotSatisfied        | 활성 행에서 게이트 다항식 ≠ 0                |
  | CopyMismatch            | 한 동치류 안의 셀 값이 서로 다름             |
  | InstanceMismatch        | 바인딩된 셀 값 ≠ 공개 입력                   |
  | InstanceIndexOutOfRange | 바인딩/복사 대상 인덱스가 공개 입력 밖       |

필드 값은 비교/직렬화가 쉽도록 int로 보관한다.
"""

from dataclasses import dataclass


class VerifyFailure:
    kind = "failure"


@dataclass
class UnassignedCell(VerifyFailure):
    """cell 이 할당되지 않았거나 unknown 값을 담고 있다.

    context: "gate" | "copy" | "instance"
    """
    cell: object
    context: str = "gate"
    gate: str = None
    row: int = None
    region: str = None

    kind = "unassigned_cell"

    def __str__(self):
        if self.context == "gate":
            where = f"gate '{self.gate}' (row {self.row}"
            if self.region:
                where += f", region '{self.region}'"
            where += ")"
        elif self.context == "copy":
            where = "copy constraint"
        else:
            where = "instance binding"
        return f"{self.cell} 이(가) 할당되지 않았는데 {where} 에서 참조됩니다"


@dataclass
class GateNotSatisfied(VerifyFailure):
    """gate 의 constraint_index 번째 다항식이 row 에서 0이 아니다."""
    gate: str
    constraint_index: int
    row: int
    constraint: str = ""
    region: str = None
    cell_values: tuple = ()

    kind = "gate_not_satisfied"

    def __str__(self):
        name = f" '{self.constraint}'" if self.constraint else ""
        text = (
            f"gate '{self.gate}' 의 제약 {self.constraint_index}{name} 이(가) "
            f"row {self.row} 에서 만족되지 않습니다"
        )
        if self.region:
            text += f" (region '{self.region}')"
        if self.cell_values:
            text += ": " + ", ".join(f"{label}={value}" for label, value in self.cell_values)
        return text


@dataclass
class CopyMismatch(VerifyFailure):
    """같은 동치류의 셀들이 서로 다른 값을 가진다."""
    cells: tuple
    values: tuple

    kind = "copy_mismatch"

    def __str__(self):
        pairs = ", ".join(f"{cell}={value}" for cell, value in zip(self.cells, self.values))
        return f"복사 제약 위반: {pairs}"


@dataclass
class InstanceMismatch(VerifyFailure):
    """바인딩된 cell 의 값(found)이 공개 입력(expected)과 다르다."""
    cell: object
    index: int
    expected: int
    found: int
    column: object = None

    kind = "instance_mismatch"

    def __str__(self):
        return (
            f"{self.cell} = {self.found} 이지만 공개 입력[{self.index}] = "
            f"{self.expected} 입니다"
        )


@dataclass
class InstanceIndexOutOfRange(VerifyFailure):
    """공개 입력 인덱스가 주어진 벡터 길이(length) 밖이다."""
    cell: object
    index: int
    length: int
    column: object = None

    kind = "instance_index_out_of_range"

    def __str__(self):
        return (
            f"{self.cell} 이(가) 공개 입력[{self.index}] 를 참조하지만 "
            f"공개 입력은 {self.length} 개뿐입니다"
        )
