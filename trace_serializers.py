"""
트레이스/검증 결과 직렬화 헬퍼
==============================

TinyDB와 JSON 응답에 담을 수 있는 형태로 트레이스 객체를 변환한다.
FR, Value, Cell, VerifyFailure, Trace 등.

필드 원소는 10진수 문자열, unknown 값은 None(null)으로 표현한다.
"""

from dataclasses import fields, is_dataclass

from zktrace.core.constraint_system import Cell, Column, ColumnKind
from zktrace.core.field import FR
from zktrace.core.trace import cell_sort_key
from zktrace.core.value import Value
from zktrace.circuits.registry import parse_int


# ─── FR ───

def serialize_fr(val):
    """FR → str(int)"""
    return str(int(val))


def deserialize_fr(s):
    """str(int) → FR"""
    return FR(int(s))


# ─── Value ───

def serialize_value(value):
    """Value → str(int) or None (unknown)"""
    if value is None or not value.is_known():
        return None
    return serialize_fr(value.inner)


def deserialize_value(data):
    """str(int) or None → Value"""
    if data is None:
        return Value.unknown()
    return Value.known(deserialize_fr(data))


# ─── Cell ───

def serialize_cell(cell):
    """Cell → {"column", "kind", "row"}"""
    return {
        "column": cell.column.label,
        "kind": cell.column.kind.value,
        "row": cell.row,
    }


# ─── VerifyFailure ───

def _plain(value):
    if isinstance(value, Cell):
        return serialize_cell(value)
    if isinstance(value, Column):
        return value.label
    if isinstance(value, FR):
        return serialize_fr(value)
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def serialize_failure(failure):
    """VerifyFailure → {"kind", "message", ...필드}"""
    data = {"kind": failure.kind, "message": str(failure)}
    if is_dataclass(failure):
        for f in fields(failure):
            data[f.name] = _plain(getattr(failure, f.name))
    return data


def serialize_failures(failures):
    return [serialize_failure(failure) for failure in failures]


# ─── Trace ───

def serialize_trace(trace):
    """Trace → dict

    {
      "k": 4, "n": 16,
      "columns": {"advice": [...], "fixed": [...], "instance": [...]},
      "advice": [{"column", "kind", "row", "value"}, ...],
      "fixed": [...],
      "selectors": {"s": [0, 1, ...]},
      "copies": [[cell, cell], ...],
      "bindings": [{"cell", "column", "index"}, ...],
      "regions": [{"name", "start", "end"}, ...],
    }
    """
    cs = trace.cs
    advice = []
    for cell in sorted(trace.advice, key=cell_sort_key):
        entry = serialize_cell(cell)
        entry["value"] = serialize_value(trace.advice[cell])
        advice.append(entry)
    fixed = []
    for cell in sorted(trace.fixed, key=cell_sort_key):
        entry = serialize_cell(cell)
        entry["value"] = serialize_fr(trace.fixed[cell])
        fixed.append(entry)
    return {
        "k": trace.k,
        "n": trace.n,
        "columns": {
            kind.value: [column.label for column in cs.columns[kind]]
            for kind in ColumnKind
        },
        "advice": advice,
        "fixed": fixed,
        "selectors": {
            selector.label: sorted(rows) for selector, rows in trace.enabled.items()
        },
        "copies": [
            [serialize_cell(left), serialize_cell(right)]
            for left, right in trace.ledger.edges
        ],
        "bindings": [
            {
                "cell": serialize_cell(binding.cell),
                "column": binding.column.label,
                "index": binding.index,
            }
            for binding in trace.binder
        ],
        "regions": [
            {"name": info.name, "start": info.start, "end": info.end}
            for info in trace.regions
        ],
    }


# ─── 요청 파싱 ───

def parse_field_list(data):
    """공개 입력 JSON → int 리스트 (또는 열마다의 리스트의 리스트)

    Raises:
        ValueError: 리스트가 아니거나 원소를 해석할 수 없음
    """
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError("공개 입력은 리스트여야 합니다")
    if data and all(isinstance(item, list) for item in data):
        return [[parse_int("public_inputs", v) for v in column] for column in data]
    return [parse_int("public_inputs", v) for v in data]
