from __future__ import annotations

import io
from typing import Mapping, Sequence

import pandas as pd

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def build_workbook(sheets: Mapping[str, Sequence[dict]], columns: Mapping[str, Sequence[str]] | None = None) -> io.BytesIO:
    """One sheet per entry; each row dict becomes a spreadsheet row."""
    columns = columns or {}
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        for name, rows in sheets.items():
            df = pd.DataFrame(list(rows), columns=list(columns[name]) if name in columns else None)
            # Excel caps sheet names at 31 chars
            df.to_excel(writer, index=False, sheet_name=name[:31])
    output.seek(0)
    return output
