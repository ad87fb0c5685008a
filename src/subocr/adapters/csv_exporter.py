## `src/subocr/adapters/csv_exporter.py`

from __future__ import annotations

import csv
import os
from typing import Mapping, Any, Iterable

from ..ports.exporters import ReportExporterPort

class CSVExporter(ReportExporterPort):
    """Exporter "report" mínimo: escribe un CSV desde `context`.

    Convención:
      - `context["headers"]` -> lista de nombres de columna (opcional)
      - `context["rows"]`    -> iterable de dicts o secuencias
    Si no hay `headers`, se infiere desde la primera fila.
    `template_id` no se usa (un CSV no tiene plantilla).
    """
    def render(self, template_id: str, context: Mapping[str, Any], out_uri: str) -> str:
        rows = list(context.get("rows", []))  # type: ignore[arg-type]
        headers = context.get("headers")
        if headers is None and rows:
            first = rows[0]
            headers = list(first.keys()) if isinstance(first, Mapping) else [f"col{i+1}" for i in range(len(first))]
        os.makedirs(os.path.dirname(out_uri) or ".", exist_ok=True)
        with open(out_uri, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            if headers:
                writer.writerow(headers)
            for r in _as_lists(rows, headers or []):
                writer.writerow(r)
        return out_uri


def _as_lists(rows: Iterable[Any], headers: list) -> Iterable[list]:
    for r in rows:
        if isinstance(r, Mapping):
            yield [r.get(h, "") for h in headers]
        else:
            yield list(r)
