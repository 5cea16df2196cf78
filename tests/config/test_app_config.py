#!filepath: tests/config/test_app_config.py
import pytest
import yaml

from crflearn.config import AppConfig, EngineConfig, LogConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for var in ("CRFLEARN_LOG_DIR", "CRFLEARN_LOG_LEVEL", "CRFLEARN_ENGINE"):
        monkeypatch.delenv(var, raising=False)
    # no stray .env from the working directory
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def sample_config_file(tmp_path):
    data = {
        "log": {
            "dir": str(tmp_path / "logs"),
            "rotation": "1 day",
            "retention": "7 days",
            "level": "DEBUG",
        },
        "engine": {"name": "crfsuite", "progress": False},
    }
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml.safe_dump(data), encoding="utf-8")
    return config_file


def test_packaged_defaults():
    cfg = AppConfig.load()

    assert isinstance(cfg.log, LogConfig)
    assert isinstance(cfg.engine, EngineConfig)
    assert cfg.engine.name == "crfsuite"
    assert cfg.engine.progress is True
    assert cfg.log.console_level is None


def test_load_from_file(sample_config_file):
    cfg = AppConfig.load(path=str(sample_config_file))

    assert cfg.log.level == "DEBUG"
    assert cfg.log.retention == "7 days"
    assert cfg.engine.progress is False


def test_env_overrides(monkeypatch, sample_config_file):
    monkeypatch.setenv("CRFLEARN_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("CRFLEARN_ENGINE", "other")

    cfg = AppConfig.load(path=str(sample_config_file))

    assert cfg.log.level == "WARNING"
    assert cfg.engine.name == "other"


def test_dotenv_in_working_directory(tmp_path, sample_config_file):
    (tmp_path / ".env").write_text("CRFLEARN_LOG_LEVEL=ERROR\n", encoding="utf-8")

    cfg = AppConfig.load(path=str(sample_config_file))

    assert cfg.log.level == "ERROR"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        AppConfig.load(path=str(tmp_path / "nope.yml"))
