import pytest

from magento_image_converter import cli
from magento_image_converter.magento_utils.config import DatabaseConfig
from magento_image_converter.magento_utils.db import MagentoDB
from magento_image_converter.magento_utils.utils import join_stored_path


def test_defaults_from_empty_environment():
    config = DatabaseConfig.from_env("magento", environ={})
    assert config == DatabaseConfig(
        database="magento",
        driver="mysql",
        host="localhost",
        port=3306,
        username="user",
        password="password",
        prefix="",
    )


def test_environment_overrides():
    config = DatabaseConfig.from_env(
        "shop",
        environ={"DB_HOST": "db", "DB_PORT": "3307", "DB_USERNAME": "m2", "DB_PASSWORD": "s3cret", "DB_PREFIX": "mg_"},
    )
    url = config.url()
    assert url.drivername == "mysql+pymysql"
    assert (url.host, url.port, url.username, url.database) == ("db", 3307, "m2", "shop")
    assert url.query["charset"] == "utf8"


def test_bad_port_is_an_environment_error():
    with pytest.raises(EnvironmentError):
        DatabaseConfig.from_env("magento", environ={"DB_PORT": "abc"})


def test_unknown_driver():
    with pytest.raises(EnvironmentError):
        DatabaseConfig(database="magento", driver="oracle").url()


def test_table_prefix_applies_to_all_tables(tmp_path):
    db = MagentoDB(DatabaseConfig(database=str(tmp_path / "m.db"), driver="sqlite", prefix="mg_"))
    assert db.tables.media_gallery.name == "mg_catalog_product_entity_media_gallery"
    assert db.tables.eav_attribute.name == "mg_eav_attribute"
    assert db.tables.attribute_varchar.name == "mg_catalog_product_entity_varchar"
    db.dispose()


def test_join_stored_path():
    assert join_stored_path("/a/b/photo.png", "photo.jpg") == "/a/b/photo.jpg"
    assert join_stored_path("photo.png", "photo.jpg") == "photo.jpg"


def test_cli_passes_arguments(monkeypatch):
    seen = {}

    def fake_convert(path, database, image_format, execute, output):
        seen.update(path=path, database=database, image_format=image_format, execute=execute, output=output)

    monkeypatch.setattr(cli, "cmd_convert", fake_convert)
    assert cli.main(["-p", "/srv/magento", "-d", "shop", "-f", "webp", "--execute"]) == 0
    assert seen == {
        "path": "/srv/magento",
        "database": "shop",
        "image_format": "webp",
        "execute": True,
        "output": "output.sql",
    }


def test_cli_reports_fatal_errors(monkeypatch):
    def failing_convert(*args):
        raise FileNotFoundError("File /srv/x.png not found!")

    monkeypatch.setattr(cli, "cmd_convert", failing_convert)
    assert cli.main(["--path", "/srv/magento", "--db", "shop"]) == 1


def test_cli_requires_path_and_db():
    with pytest.raises(SystemExit):
        cli.main(["--db", "shop"])
