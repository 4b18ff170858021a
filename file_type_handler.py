import os

import pandas as pd

from sheet import Sheet

SUPPORTED_EXTENSIONS = {".csv", ".xlsx", ".parquet"}


class UnsupportedFileType(ValueError):
    pass


class FileTypeHandler:
    DEFAULT_SHEET_NAME = "Sheet1"

    def __init__(self, path: str):
        self.path = path
        _, ext = os.path.splitext(path)
        self.ext = ext.lower()

        if self.ext not in SUPPORTED_EXTENSIONS:
            raise UnsupportedFileType(
                f"Unsupported file type {self.ext or '(none)'} (use .csv, .xlsx, or .parquet)"
            )

    def load_or_create(self) -> list[Sheet]:
        if not os.path.exists(self.path) or os.path.getsize(self.path) == 0:
            return [self._default_sheet()]

        if self.ext == ".csv":
            try:
                df = pd.read_csv(self.path)
            except pd.errors.EmptyDataError:
                return [self._default_sheet()]
            return [Sheet.from_frame(self._base_name(), df)]
        if self.ext == ".parquet":
            self._ensure_engine("pyarrow", "Parquet")
            return [Sheet.from_frame(self._base_name(), pd.read_parquet(self.path))]
        return self._load_excel()

    def save(self, sheets) -> None:
        if isinstance(sheets, Sheet):
            sheets = [sheets]
        sheets = list(sheets)
        if not sheets:
            sheets = [self._default_sheet()]
        if self.ext == ".csv":
            self._frame(sheets[0]).to_csv(self.path, index=False)
        elif self.ext == ".parquet":
            self._ensure_engine("pyarrow", "Parquet")
            self._frame(sheets[0]).to_parquet(self.path)
        else:
            self._ensure_engine("openpyxl", "XLSX")
            with pd.ExcelWriter(self.path) as writer:
                for sheet in sheets:
                    self._frame(sheet).to_excel(writer, index=False, sheet_name=sheet.name[:31])

    def _frame(self, sheet: Sheet) -> pd.DataFrame:
        frame = sheet.to_frame()
        if frame.columns.size == 0:
            return pd.DataFrame()
        return frame

    def _base_name(self) -> str:
        return os.path.splitext(os.path.basename(self.path))[0] or self.DEFAULT_SHEET_NAME

    def _default_sheet(self) -> Sheet:
        name = self.DEFAULT_SHEET_NAME if self.ext == ".xlsx" else self._base_name()
        return Sheet(name)

    def _load_excel(self) -> list[Sheet]:
        self._ensure_engine("openpyxl", "XLSX")
        frames = pd.read_excel(self.path, sheet_name=None)
        sheets = [
            Sheet.from_frame(str(name), df)
            for name, df in frames.items()
            if isinstance(df, pd.DataFrame)
        ]
        return sheets or [self._default_sheet()]

    def _ensure_engine(self, module: str, label: str):
        try:
            __import__(module)
        except ImportError:
            raise UnsupportedFileType(
                f"{label} support requires {module}. Install via: pip install {module}"
            ) from None
