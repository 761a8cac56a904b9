"""
main.py — Orchestrates CLI commands by calling the underlying modules.
"""

from .conversion.pipeline import ConversionPipeline
from .magento_utils.config import DatabaseConfig
from .magento_utils.db import MagentoDB
from .magento_utils.utils import log
from .reporting.stats import StatsAggregator


# ---------- convert ----------

def cmd_convert(
    path: str,
    database: str,
    image_format: str = "jpg",
    execute: bool = False,
    output: str = "output.sql",
) -> StatsAggregator:
    """
    Convert every product image of the Magento project at `path` to `image_format`.
    With `execute`, the database rows are rewritten too; otherwise only the SQL file is produced.
    """
    db = MagentoDB(DatabaseConfig.from_env(database))
    stats = StatsAggregator()
    pipeline = ConversionPipeline(
        db,
        base_path=path,
        target_format=image_format,
        update_database=execute,
        output_path=output,
    )

    log("Starting conversion...")
    try:
        pipeline.run(stats)
    finally:
        db.dispose()

    log(f"Process finished! You may find the output sql in {output}")
    stats.report()
    return stats
