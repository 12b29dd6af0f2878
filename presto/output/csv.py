"""
CsvRenderer — Comma-separated output

Emits the first table field (labels as header row). Data without tables
becomes a two-column `field,value` sheet of the summary fields.
"""

import csv
import io

from ..core.model import PresentationData
from .base import BaseRenderer


class CsvRenderer(BaseRenderer):
    """CSV of the first table, or of the summary values."""

    def render(self, data: PresentationData) -> str:
        if data.is_empty:
            return ""

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")

        tables = self.table_fields(data)
        if tables:
            spec, rows = tables[0]
            columns = self.table_columns(spec)
            writer.writerow([column.label for column in columns])
            for row in rows:
                writer.writerow([self.cell_text(row, column) for column in columns])
        else:
            writer.writerow(["field", "value"])
            for spec, fv in self.summary_fields(data):
                writer.writerow([spec.label, self.text(fv)])

        return buffer.getvalue()
