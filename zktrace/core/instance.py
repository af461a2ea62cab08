"""
공개 입력 바인딩 (Instance Binder)
==================================

"이 셀의 값은 공개 입력 벡터의 i번째 값과 같아야 한다"는 약속을 기록한다.

바인딩 시점에는 아무것도 검사하지 않는다. 공개 입력 벡터는 합성이 끝난
뒤 검증 단계에서야 주어질 수 있기 때문이다. 같은 인덱스에 여러 셀을 묶을
수도 있으며, 이때는 모두 같은 값이어야 한다.
"""

from collections import namedtuple

from zktrace.core.errors import ConfigurationError
from zktrace.core.field import to_field


def normalize_instance(cs, public_inputs):
    """공개 입력을 instance 열마다 하나씩인 FR 리스트의 리스트로 정규화한다.

    instance 열이 하나뿐인 회로는 평평한 시퀀스 [v₀, v₁, ...] 를 그대로 받고,
    그 외에는 열마다 하나씩의 시퀀스 [[...], [...]] 를 받는다.

    Args:
        cs: ConstraintSystem
        public_inputs: 시퀀스 또는 시퀀스의 시퀀스 (None이면 None 반환)

    Returns:
        list[list[FR]] 또는 None

    Raises:
        ConfigurationError: 열 개수가 맞지 않음, 또는 값과 리스트가 섞여 있음
    """
    if public_inputs is None:
        return None
    columns = cs.instance_columns
    public_inputs = list(public_inputs)
    shapes = {isinstance(item, (list, tuple)) for item in public_inputs}
    if len(shapes) > 1:
        raise ConfigurationError("공개 입력에 값과 리스트가 섞여 있습니다")
    nested = shapes == {True}
    if not nested:
        if not public_inputs:
            return [[] for _ in columns]
        if len(columns) != 1:
            raise ConfigurationError(
                f"instance 열이 {len(columns)} 개인 회로에는 "
                f"열마다 하나씩의 공개 입력 리스트가 필요합니다"
            )
        public_inputs = [public_inputs]
    if len(public_inputs) != len(columns):
        raise ConfigurationError(
            f"공개 입력 열 수({len(public_inputs)})가 "
            f"instance 열 수({len(columns)})와 다릅니다"
        )
    return [[to_field(v) for v in column] for column in public_inputs]


InstanceBinding = namedtuple("InstanceBinding", ["cell", "column", "index"])
InstanceBinding.__doc__ = "cell 의 값 == public_inputs[column][index]"


class InstanceBinder:
    """InstanceBinding 리스트를 등록 순서대로 보관한다."""

    def __init__(self):
        self.bindings = []

    def bind(self, cell, column, index):
        if index < 0:
            raise ValueError(f"공개 입력 인덱스는 음수일 수 없습니다: {index}")
        binding = InstanceBinding(cell, column, index)
        self.bindings.append(binding)
        return binding

    def for_index(self, column, index):
        """column의 index 번째 공개 입력에 묶인 바인딩들."""
        return [b for b in self.bindings if b.column == column and b.index == index]

    def __iter__(self):
        return iter(self.bindings)

    def __len__(self):
        return len(self.bindings)
