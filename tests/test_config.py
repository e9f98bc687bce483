import logging
import os

from seizuretrack.config.loader import APP_HOME_ENV, ConfigLoader, get_app_home
from seizuretrack.core.db import open_database
from seizuretrack.core.logger import parse_size, setup_logging


def test_app_home_follows_environment():
    assert str(get_app_home()) == os.environ[APP_HOME_ENV]


def test_default_config_is_created(tmp_path):
    loader = ConfigLoader(str(tmp_path / "config.toml"))

    config = loader.load()

    assert (tmp_path / "config.toml").exists()
    assert config["server"]["port"] == 8000
    assert config["store"]["cascade_medication_reminders"] is True
    assert config["reminders"]["check_interval"] == 60
    assert config["reports"]["week_starts_on"] == "sunday"


def test_yaml_default_config(tmp_path):
    loader = ConfigLoader(str(tmp_path / "config.yaml"))

    config = loader.load()

    assert config["reports"]["default_range"] == "30d"


def test_environment_placeholders(tmp_path, monkeypatch):
    path = tmp_path / "config.toml"
    path.write_text(
        '[server]\nport = ${SEIZURETRACK_TEST_PORT:9000}\nhost = "${SEIZURETRACK_TEST_HOST:localhost}"\n',
        encoding="utf-8",
    )
    monkeypatch.setenv("SEIZURETRACK_TEST_PORT", "8123")

    loader = ConfigLoader(str(path))
    loader.load()

    assert loader.get("server.port") == 8123
    assert loader.get("server.host") == "localhost"


def test_get_set_and_save(tmp_path):
    loader = ConfigLoader(str(tmp_path / "config.toml"))
    loader.load()

    assert loader.get("reports.missing", "fallback") == "fallback"
    assert loader.set("reports.week_starts_on", "monday") is True

    reloaded = ConfigLoader(str(tmp_path / "config.toml"))
    reloaded.load()
    assert reloaded.get("reports.week_starts_on") == "monday"


def test_open_database_creates_schema(tmp_path):
    db = open_database(str(tmp_path / "nested" / "store.db"))

    assert os.path.exists(db.db_path)
    assert db.keys() == []


def test_logging_section_names_the_log_files(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        f'[logging]\nlevel = "WARNING"\nlogs_dir = "{(tmp_path / "logs").as_posix()}"\n'
        'file_name = "tracker.log"\nerror_file_name = ""\n',
        encoding="utf-8",
    )
    loader = ConfigLoader(str(path))
    loader.load()

    try:
        setup_logging(loader)
        root = logging.getLogger()
        files = [h.baseFilename for h in root.handlers if isinstance(h, logging.FileHandler)]

        assert files == [str(tmp_path / "logs" / "tracker.log")]
        assert root.level == logging.WARNING
    finally:
        setup_logging()

    files = [h.baseFilename for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
    assert [os.path.basename(f) for f in files] == ["seizuretrack.log", "error.log"]


def test_parse_size():
    assert parse_size("512KB") == 512 * 1024
    assert parse_size("10mb") == 10 * 1024 * 1024
    assert parse_size(2048) == 2048
