"""
Mock Prover Flask Blueprint
===========================

예제 회로를 이름으로 골라 위트니스와 공개 입력을 넣고 검증 결과를 돌려준다.

  | 메서드 | 경로                 | 설명                                   |
  |--------|----------------------|----------------------------------------|
  | GET    | /mock/circuits       | 등록된 회로 목록과 예제 입력           |
  | POST   | /mock/run/<name>     | 합성 + 검증, 결과를 DB에 저장          |
  | GET    | /mock/run/<name>     | 마지막 실행 결과                       |
  | POST   | /mock/reset          | 저장된 결과 모두 삭제                  |

POST /mock/run/<name> 본문:
    {"witness": {"a": 11, "b": 13}, "public_inputs": [143], "k": 4}

회로 기술 오류(CircuitError)나 잘못된 입력은 400 {"error": ...},
모르는 회로 이름은 404 로 응답한다.
"""

import logging

from flask import Blueprint, jsonify, request
from tinydb import Query

from zktrace.core.errors import CircuitError
from zktrace.core.mock_prover import MockProver
from zktrace.circuits.registry import CIRCUITS

from trace_serializers import (
    parse_field_list,
    serialize_failures,
    serialize_trace,
)

mock_bp = Blueprint('mock', __name__, url_prefix='/mock')

DATA = Query()

# DB는 app.py에서 주입
DB = None

logger = logging.getLogger(__name__)


def init_mock_bp(db):
    """app.py에서 DB를 주입받는다."""
    global DB
    DB = db


# ─── DB 헬퍼 ───

def db_get(key):
    """DB에서 키로 데이터를 조회한다."""
    result = DB.search(DATA.type == key)
    if not result:
        return None
    return result[0].get("data")


def db_set(key, data):
    """DB에 키로 데이터를 저장한다."""
    DB.upsert({"type": key, "data": data}, DATA.type == key)


def db_remove_prefix(prefix):
    """prefix로 시작하는 모든 키를 삭제한다."""
    DB.remove(DATA.type.test(lambda t: t.startswith(prefix)))


def _error(message, status):
    return jsonify({"error": message}), status


# ──────────────────────────────────────────────────────────────
# 엔드포인트
# ──────────────────────────────────────────────────────────────

@mock_bp.route("/circuits")
def list_circuits():
    """등록된 회로 목록."""
    return jsonify([
        {
            "name": entry.name,
            "description": entry.description,
            "params": entry.params,
            "default_k": entry.default_k,
            "example_witness": entry.example_witness,
            "example_public_inputs": entry.example_public_inputs,
        }
        for entry in CIRCUITS.values()
    ])


@mock_bp.route("/run/<name>", methods=["POST"])
def run_circuit(name):
    """회로를 합성하고 검증한다."""
    entry = CIRCUITS.get(name)
    if entry is None:
        return _error(f"알 수 없는 회로: {name}", 404)

    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        return _error("JSON 객체가 필요합니다", 400)

    try:
        witness = payload.get("witness") or {}
        if not isinstance(witness, dict):
            raise ValueError("witness 는 객체여야 합니다")
        circuit = entry.build(witness)
        if "public_inputs" in payload:
            public_inputs = parse_field_list(payload["public_inputs"])
        else:
            public_inputs = list(entry.example_public_inputs)
        k = payload.get("k", entry.default_k)
        if isinstance(k, bool) or not isinstance(k, int) or not 1 <= k <= 20:
            raise ValueError(f"k 는 1..20 사이의 정수여야 합니다: {k!r}")
        prover = MockProver.run(k, circuit, public_inputs)
        failures = prover.verify()
    except (ValueError, CircuitError) as e:
        logger.warning("run '%s' rejected: %s", name, e)
        return _error(str(e), 400)

    result = {
        "name": name,
        "k": k,
        "satisfied": not failures,
        "failures": serialize_failures(failures),
        "trace": serialize_trace(prover.trace),
    }
    db_set(f"mock.{name}.last", result)
    return jsonify(result)


@mock_bp.route("/run/<name>")
def last_run(name):
    """마지막 실행 결과."""
    if name not in CIRCUITS:
        return _error(f"알 수 없는 회로: {name}", 404)
    result = db_get(f"mock.{name}.last")
    if result is None:
        return _error(f"'{name}' 의 실행 기록이 없습니다", 404)
    return jsonify(result)


@mock_bp.route("/reset", methods=["POST"])
def reset():
    """저장된 모든 실행 결과를 삭제한다."""
    db_remove_prefix("mock.")
    return jsonify({"ok": True})
