import os

import pytest
from PIL import Image
from sqlalchemy import create_engine, insert

from magento_image_converter.magento_utils.config import DatabaseConfig
from magento_image_converter.magento_utils.db import MagentoDB


MEDIA_DIR = os.path.join("media", "catalog", "product")


@pytest.fixture
def magento_root(tmp_path):
    root = tmp_path / "magento"
    (root / MEDIA_DIR).mkdir(parents=True)
    return root


@pytest.fixture
def make_image(magento_root):
    """Write a real image under the product media dir for a stored value like /a/b/x.png."""

    def _make(stored_value, size=(100, 80), mode="RGB", fmt=None):
        path = magento_root / MEDIA_DIR / stored_value.lstrip("/")
        path.parent.mkdir(parents=True, exist_ok=True)
        color = (200, 30, 30, 128) if mode == "RGBA" else (200, 30, 30)
        Image.new(mode, size, color).save(path, fmt)
        return str(path)

    return _make


@pytest.fixture
def db(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'magento.db'}")
    magento = MagentoDB(DatabaseConfig(database=str(tmp_path / "magento.db"), driver="sqlite"), engine=engine)
    magento.tables.metadata.create_all(engine)
    yield magento
    magento.dispose()


@pytest.fixture
def seed(db):
    """Insert rows: seed(gallery=[(id, value)], attributes=[(id, label)], varchar=[(id, attr_id, value)])."""

    def _seed(gallery=(), attributes=(), varchar=()):
        tables = db.tables
        with db.engine.begin() as conn:
            for value_id, value in gallery:
                conn.execute(insert(tables.media_gallery).values(value_id=value_id, value=value))
            for attribute_id, label in attributes:
                conn.execute(insert(tables.eav_attribute).values(attribute_id=attribute_id, frontend_label=label))
            for value_id, attribute_id, value in varchar:
                conn.execute(
                    insert(tables.attribute_varchar).values(value_id=value_id, attribute_id=attribute_id, value=value)
                )

    return _seed


@pytest.fixture
def values_of(db):
    """Current {value_id: value} of a table."""

    def _values(table):
        with db.engine.connect() as conn:
            return {row.value_id: row.value for row in conn.execute(table.select())}

    return _values
