"""
구조적 오류 (Structural Errors)
================================

회로 자체가 잘못 기술되었을 때 즉시 발생하는 예외들.
이런 오류가 나면 이후의 검사는 의미가 없으므로 곧바로 중단한다.

  | 예외                    | 발생 시점        | 원인                                  |
  |-------------------------|------------------|---------------------------------------|
  | ConfigurationError      | configure/합성   | 선언되지 않은 열, 중복 equality 등    |
  | AssignmentConflict      | 합성             | 같은 셀에 두 번 할당                  |
  | NotEnoughRowsAvailable  | 합성/검증        | 2^k 행 범위를 넘는 행                 |
  | ConstraintFailures      | assert_satisfied | 의미적 위반 목록 (failures.py 참고)   |

의미적 위반(게이트 불만족, 복사 불일치 등)은 예외가 아니라 값으로 수집된다.
"""


class CircuitError(Exception):
    """모든 회로 오류의 기반 클래스."""


class ConfigurationError(CircuitError):
    """열/게이트/셀렉터 선언이 잘못되었다."""


class AssignmentConflict(CircuitError):
    """이미 값이 들어 있는 셀에 다시 할당하려 했다."""

    def __init__(self, cell, region=None, annotation=None):
        self.cell = cell
        self.region = region
        self.annotation = annotation
        where = f" (region '{region}'" if region else ""
        if where and annotation:
            where += f", '{annotation}'"
        if where:
            where += ")"
        super().__init__(f"{cell} 는 이미 할당된 셀입니다{where}")


class NotEnoughRowsAvailable(CircuitError):
    """트레이스의 행 수(2^k)가 부족하다."""

    def __init__(self, k, row=None, message=None):
        self.k = k
        self.row = row
        if message is None:
            message = f"k={k} 트레이스({1 << k} 행)에 행 {row} 이(가) 없습니다"
        super().__init__(message)


class ConstraintFailures(CircuitError):
    """검증 실패 목록을 담아 던지는 예외 (MockProver.assert_satisfied)."""

    def __init__(self, failures):
        self.failures = list(failures)
        lines = [f"{len(self.failures)} 개의 제약이 만족되지 않았습니다:"]
        lines.extend(f"  - {failure}" for failure in self.failures)
        super().__init__("\n".join(lines))
