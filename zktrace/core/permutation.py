"""
배선 복사 제약 장부 (Copy-Constraint Ledger)
============================================

서로 다른 셀이 같은 값을 가져야 한다는 제약(copy constraint)을 기록한다.

**배경: 왜 복사 제약이 필요한가?**
  게이트는 한 행 안의 셀들만 묶는다. 행 r의 출력(c)이 행 r+1의 입력(a)으로
  쓰일 때, "두 셀의 값이 같다"는 사실은 게이트만으로는 강제할 수 없다.
  값을 새 셀에 다시 쓰고, 두 셀 사이에 복사 제약을 등록해야 한다.

**동치류(equivalence class)**:
  A≡B, B≡C가 등록되면 A≡C도 성립해야 한다 (추이성).
  셀들을 union-find로 묶어 같은 동치류의 모든 셀이 같은 값인지 검사한다.

    copy(a₀, b₀)   copy(b₀, a₁)
    → 동치류 {a₀, b₀, a₁}

  PLONK의 순열 σ가 같은 동치류를 순환(cycle)으로 묶는 것과 같은 정보이며,
  여기서는 검증만 하므로 순환 대신 대표 원소(root)로 표현한다.

사용 예시:
    >>> ledger = CopyConstraintLedger()
    >>> ledger.copy(cell_a, cell_b)
    >>> ledger.copy(cell_b, cell_c)
    >>> ledger.equivalent(cell_a, cell_c)   # True
"""


class CopyConstraintLedger:
    """셀 주소에 대한 union-find.

    속성:
        edges: 등록 순서대로의 (left, right) 셀 쌍 리스트
    """

    def __init__(self):
        self._parent = {}
        self._size = {}
        self._order = {}
        self.edges = []

    def _add(self, cell):
        if cell not in self._parent:
            self._parent[cell] = cell
            self._size[cell] = 1
            self._order[cell] = len(self._order)

    def find(self, cell):
        """cell이 속한 동치류의 대표 셀 (경로 압축)."""
        self._add(cell)
        root = cell
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[cell] != root:
            self._parent[cell], cell = root, self._parent[cell]
        return root

    def copy(self, left, right):
        """left ≡ right 를 등록한다 (크기 기준 합병)."""
        self.edges.append((left, right))
        left_root = self.find(left)
        right_root = self.find(right)
        if left_root == right_root:
            return
        if self._size[left_root] < self._size[right_root]:
            left_root, right_root = right_root, left_root
        self._parent[right_root] = left_root
        self._size[left_root] += self._size[right_root]

    def extend(self, edges):
        for left, right in edges:
            self.copy(left, right)

    def equivalent(self, left, right):
        if left not in self._parent or right not in self._parent:
            return left == right
        return self.find(left) == self.find(right)

    def cells(self):
        """장부에 등장한 모든 셀 (처음 등장한 순서)."""
        return sorted(self._parent, key=self._order.__getitem__)

    def classes(self):
        """크기 2 이상인 동치류 리스트.

        각 동치류는 셀이 처음 등장한 순서로 정렬된 리스트이며,
        동치류끼리도 첫 셀의 등장 순서로 정렬된다 (결정론적 출력).
        """
        groups = {}
        for cell in self.cells():
            groups.setdefault(self.find(cell), []).append(cell)
        return [group for group in groups.values() if len(group) > 1]

    def copy_of(self):
        """복제본. 원본 장부는 변경되지 않는다."""
        other = CopyConstraintLedger()
        other.extend(self.edges)
        return other

    def __len__(self):
        return len(self.edges)

    def __repr__(self):
        return f"CopyConstraintLedger(edges={len(self.edges)}, classes={len(self.classes())})"
