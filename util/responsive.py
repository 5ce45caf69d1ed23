from dataclasses import dataclass
from typing import Dict, List


@dataclass
class ColumnLayout:
    """Responsive row layout: which columns fit and how wide they are."""
    min_width: int
    columns: List[str]
    id_w: int = 6
    stat_w: int = 2
    prio_w: int = 7
    deps_w: int = 10
    subt_w: int = 6
    title_min: int = 16

    def has_column(self, name: str) -> bool:
        return name in self.columns

    def _fixed_widths(self) -> Dict[str, int]:
        base = {
            'id': self.id_w,
            'stat': self.stat_w,
            'priority': self.prio_w,
            'deps': self.deps_w,
            'subtasks': self.subt_w,
        }
        return {col: base[col] for col in self.columns if col in base}

    def required_width(self) -> int:
        return sum(self._fixed_widths().values()) + self.title_min + len(self.columns)

    def calculate_widths(self, term_width: int) -> Dict[str, int]:
        """Fixed columns keep their width; the title takes the rest (never below 4)."""
        widths = self._fixed_widths()
        gaps = len(self.columns)
        widths['title'] = max(4, term_width - sum(widths.values()) - gaps)
        return widths


class ResponsiveLayoutManager:
    """Responsive layout selector for the task list."""

    LAYOUTS = [
        ColumnLayout(min_width=110, columns=['id', 'stat', 'title', 'priority', 'deps', 'subtasks'], deps_w=14, title_min=30),
        ColumnLayout(min_width=90, columns=['id', 'stat', 'title', 'priority', 'deps', 'subtasks'], title_min=22),
        ColumnLayout(min_width=70, columns=['id', 'stat', 'title', 'priority', 'subtasks'], title_min=18),
        ColumnLayout(min_width=50, columns=['id', 'stat', 'title', 'subtasks'], id_w=5, title_min=14),
        ColumnLayout(min_width=0, columns=['id', 'stat', 'title'], id_w=5, title_min=8),
    ]

    @classmethod
    def select_layout(cls, term_width: int) -> ColumnLayout:
        for layout in cls.LAYOUTS:
            effective_min = max(layout.min_width, layout.required_width())
            if term_width >= effective_min:
                return layout
        return cls.LAYOUTS[-1]

