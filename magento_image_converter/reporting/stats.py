"""
stats.py — Size statistics for a conversion run, fed by the pipeline callback.
"""

import os
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional

import pandas as pd

from ..magento_utils.utils import format_bytes, log


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def saved_pct(old_bytes: int, new_bytes: int) -> int:
    """Percentage of the original size saved by the conversion."""
    if old_bytes == 0:
        return 0
    return round_half_up(100 - (new_bytes / old_bytes) * 100)


class StatsAggregator:
    """Callback collecting before/after sizes for every converted image."""

    def __init__(self):
        self.count = 0
        self.old_bytes = 0
        self.new_bytes = 0
        self.saves: List[Dict[str, int]] = []

    def add(self, old_bytes: int, new_bytes: int) -> Dict[str, int]:
        self.count += 1
        self.old_bytes += old_bytes
        self.new_bytes += new_bytes
        item = {
            "orig": old_bytes,
            "size": old_bytes - new_bytes,
            "pct": saved_pct(old_bytes, new_bytes),
        }
        self.saves.append(item)
        return item

    def __call__(self, old_image: str, new_image: str) -> None:
        old_bytes = os.path.getsize(old_image)
        new_bytes = os.path.getsize(new_image)
        item = self.add(old_bytes, new_bytes)

        log(
            f"{self.count} - {os.path.basename(old_image)} ({format_bytes(old_bytes)}) => "
            f"{os.path.basename(new_image)} ({format_bytes(new_bytes)}) - "
            f"Saved: {format_bytes(item['size'])} ({item['pct']}%)"
        )

    def summary(self) -> Optional[Dict[str, float]]:
        if not self.saves or self.old_bytes == 0:
            return None

        df = pd.DataFrame(self.saves)
        return {
            "count": self.count,
            "old": self.old_bytes,
            "new": self.new_bytes,
            "saved": self.old_bytes - self.new_bytes,
            "pct": saved_pct(self.old_bytes, self.new_bytes),
            "avg_saved": float(df["size"].mean()),
            "avg_size": float(df["orig"].mean()),
            "avg_pct": round_half_up(df["pct"].mean()),
        }

    def report(self) -> None:
        totals = self.summary()
        if totals is None:
            log("No images converted.")
            return

        log(
            f"Total {totals['count']} images converted: {format_bytes(totals['old'])} => "
            f"{format_bytes(totals['new'])} - Saved: {format_bytes(totals['saved'])} ({totals['pct']}%)"
        )
        log(
            f"Average file size: {format_bytes(totals['avg_size'])} - "
            f"Average save per file: {format_bytes(totals['avg_saved'])} ({totals['avg_pct']}%)"
        )
