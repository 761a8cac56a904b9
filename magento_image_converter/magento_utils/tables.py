"""
tables.py — The three Magento tables the converter reads and writes.
Only the columns we touch are declared.
"""

from sqlalchemy import Column, Integer, MetaData, String, Table


MEDIA_GALLERY = "catalog_product_entity_media_gallery"
EAV_ATTRIBUTE = "eav_attribute"
ATTRIBUTE_VARCHAR = "catalog_product_entity_varchar"

IMAGE_LABELS = ["thumbnail", "image", "small_image"]
IMAGE_LABEL_SUFFIX = "small_image"


class MagentoTables:
    """Table definitions, honouring the optional Magento table prefix."""

    def __init__(self, prefix: str = ""):
        self.prefix = prefix
        self.metadata = MetaData()

        self.media_gallery = Table(
            prefix + MEDIA_GALLERY,
            self.metadata,
            Column("value_id", Integer, primary_key=True),
            Column("value", String(255)),
        )
        self.eav_attribute = Table(
            prefix + EAV_ATTRIBUTE,
            self.metadata,
            Column("attribute_id", Integer, primary_key=True),
            Column("frontend_label", String(255)),
        )
        self.attribute_varchar = Table(
            prefix + ATTRIBUTE_VARCHAR,
            self.metadata,
            Column("value_id", Integer, primary_key=True),
            Column("attribute_id", Integer, nullable=False),
            Column("value", String(255)),
        )
