"""
records.py — Streams the Magento rows whose image still needs converting.
"""

from enum import Enum
from typing import Iterator, List, NamedTuple

from sqlalchemy import or_, select
from sqlalchemy.engine import Connection

from .tables import IMAGE_LABEL_SUFFIX, IMAGE_LABELS, MagentoTables


class SourceTable(Enum):
    MEDIA_GALLERY = "media_gallery"
    ATTRIBUTE_VARCHAR = "attribute_varchar"


class ImageReference(NamedTuple):
    row_id: int
    stored_value: str
    source_table: SourceTable


class RecordSource:
    """
    Lazily pages through the gallery and varchar tables.
    Each batch is fetched completely before it is yielded, so callers may run
    UPDATEs on the same connection while iterating.
    """

    def __init__(self, connection: Connection, tables: MagentoTables, target_format: str, batch_size: int = 500):
        self.connection = connection
        self.tables = tables
        self.target_format = target_format
        self.batch_size = batch_size

    @property
    def _not_converted_pattern(self) -> str:
        return f"%.{self.target_format}"

    def _paginate(self, table, query, source: SourceTable) -> Iterator[ImageReference]:
        last_id = None
        while True:
            page = query
            if last_id is not None:
                page = page.where(table.c.value_id > last_id)
            page = page.order_by(table.c.value_id).limit(self.batch_size)

            rows = self.connection.execute(page).fetchall()
            for row in rows:
                yield ImageReference(row.value_id, row.value, source)

            if len(rows) < self.batch_size:
                return
            last_id = rows[-1].value_id

    def gallery_images(self) -> Iterator[ImageReference]:
        table = self.tables.media_gallery
        query = (
            select(table.c.value, table.c.value_id)
            .where(table.c.value.not_like(self._not_converted_pattern))
        )
        return self._paginate(table, query, SourceTable.MEDIA_GALLERY)

    def image_attribute_ids(self) -> List[int]:
        """Ids of the eav attributes holding image paths (thumbnail, image, *small_image)."""
        attr = self.tables.eav_attribute
        query = select(attr.c.attribute_id).where(
            or_(
                attr.c.frontend_label.in_(IMAGE_LABELS),
                attr.c.frontend_label.like(f"%{IMAGE_LABEL_SUFFIX}"),
            )
        )
        return [row.attribute_id for row in self.connection.execute(query)]

    def attribute_images(self) -> Iterator[ImageReference]:
        # Generator so the attribute lookup also runs lazily, on first iteration
        attribute_ids = self.image_attribute_ids()
        if not attribute_ids:
            return

        table = self.tables.attribute_varchar
        query = (
            select(table.c.value, table.c.value_id)
            .where(table.c.value.is_not(None))
            .where(table.c.attribute_id.in_(attribute_ids))
            .where(table.c.value.not_like(self._not_converted_pattern))
        )
        yield from self._paginate(table, query, SourceTable.ATTRIBUTE_VARCHAR)
