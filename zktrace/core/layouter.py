"""
트레이스 조립: Layouter 와 Region
=================================

합성(synthesize) 단계에서 칩(chip)이 트레이스에 값을 쓰는 API.

**Region**:
  이름 붙은 할당 묶음. 한 region 안의 할당, 셀렉터 활성화, 복사 제약은
  region 함수가 정상 종료했을 때만 한꺼번에 커밋된다. 도중에 예외가 나면
  아무것도 반영되지 않는다.

  region 안의 행 번호(offset)는 region 시작 행 기준이다. Layouter는 region을
  차례대로 쌓으므로 (각 region은 그때까지 쓰인 마지막 행 다음에서 시작)
  offset 0만 쓰는 region들을 연달아 만들면 행 0, 1, 2, ... 가 채워진다.

**이전 행의 출력을 다음 행의 입력으로 쓰기**:
  값을 새 셀에 다시 쓰는 것만으로는 부족하다. 두 셀 사이에 복사 제약을
  등록해야 검증기가 조작을 잡아낸다. AssignedCell.copy_advice()가 두 가지를
  함께 한다.

    >>> def next_row(region):
    ...     s.enable(region, 0)
    ...     a = prev_b.copy_advice("a", region, config.a, 0)
    ...     b = prev_c.copy_advice("b", region, config.b, 0)
    ...     c = region.assign_advice("c", config.c, 0, a.value + b.value)
    ...     return a, b, c
    >>> a, b, c = layouter.assign_region("next row", next_row)

**namespace**:
  layouter.namespace("fib") 는 region 이름 앞에 "fib/" 를 붙이는 자식
  layouter를 반환한다. 이름은 진단 메시지에만 쓰인다.
"""

from zktrace.core.constraint_system import Cell, ColumnKind
from zktrace.core.errors import AssignmentConflict, ConfigurationError
from zktrace.core.value import Value


def as_cell(cell):
    """Cell 또는 AssignedCell 에서 Cell 을 꺼낸다."""
    if isinstance(cell, AssignedCell):
        return cell.cell
    if isinstance(cell, Cell):
        return cell
    raise TypeError(f"셀이 아닙니다: {cell!r}")


class AssignedCell:
    """값이 쓰인 셀. 불변이다.

    속성:
        cell: Cell (주소)
        value: Value
    """

    __slots__ = ("cell", "value")

    def __init__(self, cell, value):
        self.cell = cell
        self.value = value

    @property
    def column(self):
        return self.cell.column

    @property
    def row(self):
        return self.cell.row

    def copy_advice(self, annotation, region, column, offset):
        """이 셀의 값을 region의 (column, offset)에 다시 쓰고 복사 제약을 등록한다.

        Returns:
            AssignedCell: 새로 쓰인 셀
        """
        copied = region.assign_advice(annotation, column, offset, self.value)
        region.constrain_equal(self.cell, copied.cell)
        return copied

    def __repr__(self):
        return f"AssignedCell({self.cell!r}, {self.value!r})"


class Region:
    """스테이징 영역. Layouter.assign_region 이 만들어 넘겨준다.

    속성:
        name: region 이름 (namespace 포함)
        start: 시작 행
        height: 지금까지 사용한 행 수 (가장 큰 offset + 1)
    """

    def __init__(self, name, assembler, start):
        self.name = name
        self.start = start
        self.height = 0
        self.staged_advice = {}
        self.staged_fixed = {}
        self.staged_selectors = []
        self.staged_copies = []
        self._assembler = assembler

    @property
    def cs(self):
        return self._assembler.cs

    def _row(self, offset):
        if offset < 0:
            raise ConfigurationError(
                f"region '{self.name}' 의 offset은 음수일 수 없습니다: {offset}"
            )
        row = self.start + offset
        self._assembler.check_row(row)
        self.height = max(self.height, offset + 1)
        return row

    def _claim(self, cell, annotation):
        self._assembler.check_unassigned(cell, self.name, annotation)
        if cell in self.staged_advice or cell in self.staged_fixed:
            raise AssignmentConflict(cell, self.name, annotation)

    def _column(self, column, kind):
        self.cs.check_column(column)
        if column.kind is not kind:
            raise ConfigurationError(
                f"{column.label} 은(는) {column.kind.value} 열입니다 "
                f"({kind.value} 열이 필요합니다)"
            )

    # ── 할당 ──

    def assign_advice(self, annotation, column, offset, value):
        """advice 셀에 값을 쓴다.

        Args:
            annotation: 진단용 설명
            column: advice 열
            offset: region 내 행 오프셋
            value: Value, FR, int, 또는 이들을 반환하는 인자 없는 함수

        Returns:
            AssignedCell

        Raises:
            AssignmentConflict: 이미 값이 있는 셀
            NotEnoughRowsAvailable: 트레이스 범위 밖의 행
        """
        self._column(column, ColumnKind.ADVICE)
        cell = Cell(column, self._row(offset))
        self._claim(cell, annotation)
        if callable(value):
            value = value()
        value = Value.of(value)
        self.staged_advice[cell] = value
        return AssignedCell(cell, value)

    def assign_fixed(self, annotation, column, offset, value):
        """fixed 셀에 상수를 쓴다. 상수는 위트니스와 무관하므로 known이어야 한다."""
        self._column(column, ColumnKind.FIXED)
        cell = Cell(column, self._row(offset))
        self._claim(cell, annotation)
        value = Value.of(value)
        if not value.is_known():
            raise ConfigurationError(
                f"fixed 셀 {cell} 에는 unknown 값을 쓸 수 없습니다 ('{annotation}')"
            )
        self.staged_fixed[cell] = value.inner
        return AssignedCell(cell, value)

    def assign_advice_from_instance(self, annotation, instance_column, row,
                                    advice_column, offset):
        """공개 입력 instance_column[row] 를 advice 셀로 가져오고 두 셀을 복사 제약으로 잇는다.

        합성 시점에 공개 입력을 모르면 advice 셀의 값은 unknown이다.
        """
        instance_cell = Cell(instance_column, row)
        self._assembler.check_equality(instance_cell)
        self._assembler.check_row(row)
        value = self._assembler.instance_value(instance_column, row)
        assigned = self.assign_advice(annotation, advice_column, offset, value)
        self.constrain_equal(instance_cell, assigned.cell)
        return assigned

    def enable_selector(self, annotation, selector, offset):
        """offset 행에서 selector를 켠다. 이미 켜진 행이면 아무 일도 없다."""
        self.cs.check_selector(selector)
        row = self._row(offset)
        self.staged_selectors.append((selector, row))

    def constrain_equal(self, left, right):
        """두 셀이 같은 값을 가져야 한다는 복사 제약을 등록한다."""
        left = as_cell(left)
        right = as_cell(right)
        self._assembler.check_equality(left)
        self._assembler.check_equality(right)
        self.staged_copies.append((left, right))

    def __repr__(self):
        return f"Region({self.name!r}, start={self.start}, height={self.height})"


class Layouter:
    """region을 차례대로 쌓는 단순 floor planner."""

    def __init__(self, assembler, namespace=()):
        self._assembler = assembler
        self._namespace = tuple(namespace)

    def namespace(self, name):
        """region 이름에 name 접두어를 붙이는 자식 layouter."""
        return Layouter(self._assembler, self._namespace + (name,))

    def _qualified(self, name):
        return "/".join(self._namespace + (name,))

    def assign_region(self, name, assignment):
        """assignment(region)을 실행하고, 성공하면 region을 커밋한다.

        Args:
            name: region 이름 (진단용)
            assignment: Region을 받는 함수. 반환값은 그대로 돌려준다.

        Returns:
            assignment의 반환값

        예외가 나면 region의 어떤 변경도 커밋되지 않고 예외가 전파된다.
        """
        region = Region(self._qualified(name), self._assembler, self._assembler.next_row)
        result = assignment(region)
        self._assembler.commit(region)
        return result

    def constrain_instance(self, cell, instance_column, row):
        """cell 의 값이 공개 입력 instance_column[row] 와 같아야 함을 기록한다."""
        return self._assembler.bind_instance(as_cell(cell), instance_column, row)
