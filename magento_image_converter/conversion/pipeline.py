"""
pipeline.py — Drives one conversion pass over the Magento catalog:
rows -> file on disk -> converted file -> DB update + SQL log -> callback.
"""

import os
from enum import Enum
from typing import Callable, Iterator, NamedTuple, Optional

from sqlalchemy import update
from sqlalchemy.engine import Connection

from ..magento_utils.db import MagentoDB
from ..magento_utils.records import ImageReference, RecordSource, SourceTable
from ..magento_utils.sql_log import SqlLogBuilder
from ..magento_utils.utils import join_stored_path, log
from ..media_processing.image_tools import resolve_image_path, transcode_image


Callback = Callable[[str, str], None]


class PipelineState(Enum):
    IDLE = "idle"
    TRANSACTION_OPEN = "transaction_open"
    PROCESSING_GALLERY = "processing_gallery"
    PROCESSING_ATTRIBUTES = "processing_attributes"
    COMMITTING = "committing"
    DONE = "done"
    ABORTING = "aborting"


class ResolvedImage(NamedTuple):
    reference: ImageReference
    absolute_path: str

    @classmethod
    def resolve(cls, reference: ImageReference, base_path: str) -> "ResolvedImage":
        """Raises FileNotFoundError unless the referenced file is on disk."""
        return cls(reference, resolve_image_path(reference.stored_value, base_path))


class ConvertedImage(NamedTuple):
    original: ResolvedImage
    new_path: str
    new_filename: str


class PendingUpdate(NamedTuple):
    row_id: int
    table: str
    new_value: str


class ConversionPipeline:
    """
    Converts every gallery and image-attribute file that is not yet in the target format.

    The SQL log is always built; the live database is only touched when
    update_database is set, inside a single transaction that is rolled back on any
    fatal error. The log file is only written when the whole pass succeeds.
    """

    def __init__(
        self,
        db: MagentoDB,
        base_path: str,
        target_format: str = "jpg",
        update_database: bool = False,
        output_path: str = "output.sql",
    ):
        self.db = db
        self.base_path = os.path.realpath(base_path)
        self.target_format = target_format
        self.update_database = update_database
        self.output_path = output_path
        self.state = PipelineState.IDLE
        self.sql = SqlLogBuilder()

    def _enter(self, state: PipelineState) -> None:
        self.state = state
        log(f"Pipeline state: {state.value}")

    def _table(self, source: SourceTable):
        if source is SourceTable.MEDIA_GALLERY:
            return self.db.tables.media_gallery
        return self.db.tables.attribute_varchar

    def _convert(self, resolved: ResolvedImage) -> ConvertedImage:
        new_path = transcode_image(resolved.absolute_path, self.target_format)
        return ConvertedImage(resolved, new_path, os.path.basename(new_path))

    def _pending_update(self, converted: ConvertedImage) -> PendingUpdate:
        reference = converted.original.reference
        return PendingUpdate(
            reference.row_id,
            self._table(reference.source_table).name,
            join_stored_path(reference.stored_value, converted.new_filename),
        )

    def _apply_update(self, conn: Connection, reference: ImageReference, pending: PendingUpdate) -> None:
        self.sql.append(pending.row_id, pending.table, pending.new_value)

        if self.update_database:
            table = self._table(reference.source_table)
            conn.execute(
                update(table)
                .where(table.c.value_id == pending.row_id)
                .values(value=pending.new_value)
            )

    def _process_stream(
        self,
        conn: Connection,
        references: Iterator[ImageReference],
        skip_missing: bool,
        callback: Optional[Callback],
    ) -> int:
        converted_count = 0
        for reference in references:
            try:
                resolved = ResolvedImage.resolve(reference, self.base_path)
            except FileNotFoundError as e:
                if not skip_missing:
                    raise
                log(f"Skipping {reference.source_table.value} row {reference.row_id}: {e}")
                continue

            converted = self._convert(resolved)
            self._apply_update(conn, reference, self._pending_update(converted))
            converted_count += 1

            if callback:
                callback(resolved.absolute_path, converted.new_path)
        return converted_count

    def run(self, callback: Optional[Callback] = None) -> int:
        """Execute the conversion pass. Returns how many images were converted."""
        converted = 0
        self.sql = SqlLogBuilder()
        with self.db.connect() as conn:
            transaction = None
            if self.update_database:
                transaction = conn.begin()
                self._enter(PipelineState.TRANSACTION_OPEN)

            try:
                source = RecordSource(conn, self.db.tables, self.target_format)

                self._enter(PipelineState.PROCESSING_GALLERY)
                converted += self._process_stream(conn, source.gallery_images(), False, callback)

                self._enter(PipelineState.PROCESSING_ATTRIBUTES)
                converted += self._process_stream(conn, source.attribute_images(), True, callback)

                self._enter(PipelineState.COMMITTING)
                if transaction is not None:
                    transaction.commit()

                self.sql.write(self.output_path)
            except Exception as e:
                self._enter(PipelineState.ABORTING)
                if transaction is not None and transaction.is_active:
                    transaction.rollback()
                log(f"Conversion aborted: {e}")
                raise

        self._enter(PipelineState.DONE)
        return converted
