"""
Per-tick recording of loop outputs.

SimpleRecorder keeps one row per tick in memory and dumps to CSV or JSONL.
"""
import csv
import json
import os
import logging
from typing import Any, Dict, List
from datetime import datetime, timezone

import numpy as np

logger = logging.getLogger(__name__)


def _clean_value(v: Any) -> Any:
    if v is None or isinstance(v, (bool, str)):
        return v
    if isinstance(v, (int, float, np.number)):
        return float(v)
    if isinstance(v, np.ndarray):
        if v.size == 1:
            return float(v.item())
        return v.astype(np.float64).tolist()
    if isinstance(v, (list, tuple)):
        return [_clean_value(x) for x in v]
    return str(v)


class SimpleRecorder:
    """In-memory tick recorder with multiple output formats."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.rows: List[Dict] = []
        self._metadata = {
            'created_at': datetime.now(timezone.utc).isoformat(),
        }

    def set_metadata(self, **kwargs):
        """Set metadata written as the JSONL header line."""
        self._metadata.update(kwargs)

    def log(self, row: Dict):
        """Log a row; numpy scalars and arrays become plain floats/lists."""
        if not self.enabled:
            return
        self.rows.append({k: _clean_value(v) for k, v in row.items()})

    def dump_csv(self, path: str):
        if not self.enabled or not self.rows:
            return

        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

        # Lists (e.g. motor command vectors) are stringified for CSV
        csv_rows = [
            {k: (str(v) if isinstance(v, list) else v) for k, v in row.items()}
            for row in self.rows
        ]
        keys = sorted({k for row in csv_rows for k in row})
        with open(path, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=keys)
            writer.writeheader()
            writer.writerows(csv_rows)
        logger.info(f"Saved {len(csv_rows)} rows to CSV: {path}")

    def dump_jsonl(self, path: str):
        if not self.enabled or not self.rows:
            return

        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

        with open(path, 'w') as f:
            f.write(json.dumps({'_metadata': self._metadata}) + '\n')
            for row in self.rows:
                f.write(json.dumps(row) + '\n')

        logger.info(f"Saved {len(self.rows)} rows to JSONL: {path}")

    def export(self, fmt: str, path: str) -> str:
        """Dump to ``path`` + extension for ``fmt`` and return the full path."""
        writers = {
            "csv": self.dump_csv,
            "jsonl": self.dump_jsonl,
        }
        if fmt not in writers:
            raise ValueError(f"Unsupported format: {fmt}")
        full_path = f"{path}.{fmt}"
        writers[fmt](full_path)
        return full_path

    def clear(self):
        self.rows.clear()

    def get_recent(self, n: int = 10) -> List[Dict]:
        return self.rows[-n:]

    def get_summary(self) -> Dict[str, Any]:
        """Row count plus basic stats for scalar numeric columns."""
        if not self.rows:
            return {'row_count': 0}

        numeric_cols: Dict[str, List[float]] = {}
        for row in self.rows:
            for k, v in row.items():
                if isinstance(v, float):
                    numeric_cols.setdefault(k, []).append(v)

        summary = {
            'row_count': len(self.rows),
            'columns': list(self.rows[0].keys()),
            'numeric_stats': {},
        }
        for col, values in numeric_cols.items():
            summary['numeric_stats'][col] = {
                'count': len(values),
                'mean': float(np.mean(values)),
                'std': float(np.std(values)),
                'min': float(np.min(values)),
                'max': float(np.max(values)),
            }
        return summary
