"""
Mock Prover 데모: 예제 회로 네 개
=================================

각 회로를 합성하고, 올바른 공개 입력과 틀린 공개 입력으로 검증한다.
마지막으로 피보나치 트레이스의 중간 셀을 조작하여 복사 제약이
조작을 잡아내는 것을 보인다.

실행:
    python -m zktrace.circuits.example

흐름:
    1. 인수분해 (a · b = c)
    2. 피보나치 (8 단계)
    3. 미니 범용 게이트 (x²·y² + constant)
    4. x³ + x + 5 = 35
    5. 트레이스 조작 (건전성)
"""

from zktrace.core.constraint_system import Cell
from zktrace.core.mock_prover import MockProver
from zktrace.circuits.registry import CIRCUITS


def _report(prover):
    failures = prover.verify()
    if not failures:
        print("    검증 결과: 성공 ✓")
    else:
        print(f"    검증 결과: 실패 ✗ ({len(failures)} 개)")
        for failure in failures:
            print(f"      - {failure}")
    return failures


def _bad_inputs(public_inputs):
    """마지막 공개 입력에 1을 더한 벡터."""
    bad = list(public_inputs)
    bad[-1] = bad[-1] + 1
    return bad


def main():
    print("=" * 60)
    print("  Arithmetic Trace Mock Prover Demo")
    print("=" * 60)

    ok = True
    for step, entry in enumerate(CIRCUITS.values(), start=1):
        print(f"\n[{step}] {entry.name}: {entry.description}")
        circuit = entry.build(entry.example_witness)
        print(f"    위트니스: {entry.example_witness}")

        prover = MockProver.run(entry.default_k, circuit, entry.example_public_inputs)
        print(f"    트레이스: {prover.trace}")
        print(f"    공개 입력: {entry.example_public_inputs}")
        good = _report(prover)

        bad_inputs = _bad_inputs(entry.example_public_inputs)
        print(f"    틀린 공개 입력: {bad_inputs}")
        bad = _report(MockProver.run(entry.default_k, circuit, bad_inputs))

        ok = ok and not good and bool(bad)

    # ── 트레이스 조작 ──
    # 피보나치 row 3 의 a 셀을 바꾸면 게이트는 (a + b - c ≠ 0) 으로,
    # 복사 제약은 (a₃ ≠ b₂) 로 실패해야 한다.
    print(f"\n[{len(CIRCUITS) + 1}] 트레이스 조작 (fibonacci, row 3 의 a 셀 변조)...")
    entry = CIRCUITS["fibonacci"]
    prover = MockProver.run(
        entry.default_k, entry.build(entry.example_witness), entry.example_public_inputs
    )
    config = prover.shape.config
    target = Cell(config.a, 3)
    tampered = prover.trace.with_advice(target, prover.trace.advice[target] + 1)
    print(f"    {target}: {prover.trace.advice[target]} → {tampered.advice[target]}")
    forged = _report(MockProver(prover.cs, tampered, entry.example_public_inputs))
    ok = ok and bool(forged)

    print("\n" + "=" * 60)
    if ok:
        print("  데모 완료: 모든 결과가 예상과 같습니다!")
    else:
        print("  데모 완료: 예상과 다른 결과가 있습니다")
    print("=" * 60)

    return ok


if __name__ == "__main__":
    main()
