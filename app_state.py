import itertools
from dataclasses import replace

from sheet import Sheet


class AppState:
    def __init__(self, sheets=None, active_sheet=None, file_path=None, file_handler=None):
        self.file_path = file_path
        self.file_handler = file_handler

        self.sheets: dict[str, Sheet] = {}
        self.sheet_order: list[str] = []
        self.active_sheet: str | None = None

        self.charts: list = []
        self.ai_mode = True

        self.undo_stack: list[dict] = []
        self.redo_stack: list[dict] = []
        self.undo_max_depth = 50

        self._sheet_ids = itertools.count(1)
        self._chart_ids = itertools.count(1)

        self._init_sheets(sheets, active_sheet)

    def _init_sheets(self, sheets, active_sheet):
        if isinstance(sheets, Sheet):
            sheets = [sheets]
        for sheet in sheets or []:
            if isinstance(sheet, Sheet):
                self._register(sheet)
        if not self.sheet_order:
            self._register(Sheet("Sheet 1"))
        if active_sheet in self.sheets:
            self.active_sheet = active_sheet
        else:
            self.active_sheet = self.sheet_order[0]

    def _register(self, sheet: Sheet) -> str:
        sheet_id = f"sheet-{next(self._sheet_ids)}"
        self.sheets[sheet_id] = sheet
        self.sheet_order.append(sheet_id)
        return sheet_id

    @property
    def sheet(self) -> Sheet:
        return self.sheets[self.active_sheet]

    def find_sheet(self, name: str) -> Sheet | None:
        for sheet_id in self.sheet_order:
            if self.sheets[sheet_id].name == name:
                return self.sheets[sheet_id]
        return None

    def get_sheet_names(self) -> list[str]:
        return [self.sheets[s].name for s in self.sheet_order]

    # ---------- undo ----------
    def snapshot_state(self) -> dict:
        return {
            "sheets": {sid: s.copy() for sid, s in self.sheets.items()},
            "sheet_order": list(self.sheet_order),
            "active_sheet": self.active_sheet,
            "charts": [replace(c) for c in self.charts],
            "ai_mode": self.ai_mode,
        }

    def restore_state(self, snap: dict):
        restored = {}
        for sheet_id, saved in snap["sheets"].items():
            live = self.sheets.get(sheet_id)
            if live is None:
                restored[sheet_id] = saved
                continue
            # keep object identity so views bound to a sheet stay valid
            live.name = saved.name
            live.row_count = saved.row_count
            live.col_count = saved.col_count
            live.cells = saved.cells
            restored[sheet_id] = live
        self.sheets = restored
        self.sheet_order = list(snap["sheet_order"])
        self.active_sheet = snap["active_sheet"]
        self.charts = list(snap["charts"])
        self.ai_mode = snap["ai_mode"]

    def push_undo(self):
        self.undo_stack.append(self.snapshot_state())
        if len(self.undo_stack) > self.undo_max_depth:
            self.undo_stack.pop(0)
        self.redo_stack.clear()

    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def undo(self) -> bool:
        if not self.undo_stack:
            return False
        self.redo_stack.append(self.snapshot_state())
        self.restore_state(self.undo_stack.pop())
        return True

    def redo(self) -> bool:
        if not self.redo_stack:
            return False
        self.undo_stack.append(self.snapshot_state())
        if len(self.undo_stack) > self.undo_max_depth:
            self.undo_stack.pop(0)
        self.restore_state(self.redo_stack.pop())
        return True

    # ---------- sheets ----------
    def add_sheet(self, name: str | None = None) -> str:
        self.push_undo()
        sheet_id = self._register(Sheet(name or f"Sheet {len(self.sheet_order) + 1}"))
        self.active_sheet = sheet_id
        return sheet_id

    def remove_sheet(self, sheet_id: str) -> bool:
        if sheet_id not in self.sheets or len(self.sheet_order) == 1:
            return False
        self.push_undo()
        del self.sheets[sheet_id]
        self.sheet_order.remove(sheet_id)
        if self.active_sheet == sheet_id:
            self.active_sheet = self.sheet_order[0]
        return True

    def set_active_sheet(self, sheet_id: str) -> bool:
        if sheet_id not in self.sheets:
            return False
        self.active_sheet = sheet_id
        return True

    def switch_sheet(self, delta: int) -> str:
        idx = self.sheet_order.index(self.active_sheet)
        self.active_sheet = self.sheet_order[(idx + delta) % len(self.sheet_order)]
        return self.active_sheet

    # ---------- cells ----------
    def update_cell(self, address: str, value):
        self.push_undo()
        return self.sheet.update_cell(address, value)

    def format_cells(self, addresses, **style):
        self.push_undo()
        self.sheet.format_cells(addresses, **style)

    def apply_updates(self, updates: dict) -> list[str]:
        self.push_undo()
        return self.sheet.apply_updates(updates)

    def load_rows(self, rows):
        self.push_undo()
        self.sheet.load_rows(rows)

    # ---------- charts ----------
    def add_chart(self, chart) -> str:
        self.push_undo()
        chart = replace(chart, chart_id=f"chart-{next(self._chart_ids)}")
        self.charts.append(chart)
        return chart.chart_id

    def get_chart(self, chart_id: str):
        for chart in self.charts:
            if chart.chart_id == chart_id:
                return chart
        return None

    def update_chart(self, chart_id: str, **updates) -> bool:
        for idx, chart in enumerate(self.charts):
            if chart.chart_id == chart_id:
                self.push_undo()
                self.charts[idx] = replace(chart, **updates)
                return True
        return False

    def remove_chart(self, chart_id: str) -> bool:
        remaining = [c for c in self.charts if c.chart_id != chart_id]
        if len(remaining) == len(self.charts):
            return False
        self.push_undo()
        self.charts = remaining
        return True

    def toggle_ai_mode(self) -> bool:
        self.ai_mode = not self.ai_mode
        return self.ai_mode
