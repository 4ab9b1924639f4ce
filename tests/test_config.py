"""
Test configuration loading
"""

from pathlib import Path

import pytest
import yaml

from odpwriter.config import (
    ArchiveConfig,
    LoggingConfig,
    WriterConfig,
    find_config_file,
    get_config,
    load_config,
    save_config,
    set_config,
)


class TestWriterConfig:

    def test_defaults(self):
        config = WriterConfig()
        assert not config.disk_caching.enabled
        assert config.archive.compression == "deflated"
        assert config.temp.prefix == "odptmp"
        assert config.logging.level == "WARNING"

    def test_from_dict_partial(self):
        config = WriterConfig.from_dict({"archive": {"compression": "stored"}})
        assert config.archive.compression == "stored"
        assert config.temp.directory == "."

    def test_dict_roundtrip(self):
        config = WriterConfig.from_dict({
            "disk_caching": {"enabled": True, "directory": "/var/tmp"},
            "archive": {"compresslevel": 9},
            "logging": {"level": "debug"},
        })
        assert WriterConfig.from_dict(config.to_dict()).to_dict() == config.to_dict()
        assert config.logging.level == "DEBUG"

    def test_invalid_archive_settings(self):
        with pytest.raises(ValueError):
            ArchiveConfig(compression="lzma")
        with pytest.raises(ValueError):
            ArchiveConfig(compresslevel=12)

    def test_logging_level_uppercased(self):
        assert LoggingConfig(level="info").level == "INFO"


class TestLoadConfig:

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "odpwriter.yaml"
        path.write_text(yaml.safe_dump({
            "disk_caching": {"enabled": True, "directory": str(tmp_path)},
            "temp": {"prefix": "stage"},
        }))

        config = load_config(path)
        assert config.disk_caching.enabled
        assert config.disk_caching.directory == str(tmp_path)
        assert config.temp.prefix == "stage"

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "absent.yaml")
        assert config.to_dict() == WriterConfig().to_dict()

    def test_malformed_file_gives_defaults(self, tmp_path):
        path = tmp_path / "odpwriter.yaml"
        path.write_text("archive: [unclosed\n")
        assert load_config(path).to_dict() == WriterConfig().to_dict()

    def test_invalid_value_gives_defaults(self, tmp_path):
        path = tmp_path / "odpwriter.yaml"
        path.write_text("archive:\n  compression: brotli\n")
        assert load_config(path).archive.compression == "deflated"

    def test_env_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ODPWRITER_DISK_CACHING", "yes")
        monkeypatch.setenv("ODPWRITER_DISK_CACHE_DIR", str(tmp_path))
        monkeypatch.setenv("ODPWRITER_TEMP_DIR", "/tmp")
        monkeypatch.setenv("ODPWRITER_COMPRESSION", "STORED")
        monkeypatch.setenv("ODPWRITER_LOG_LEVEL", "debug")

        config = load_config(tmp_path / "absent.yaml")
        assert config.disk_caching.enabled
        assert config.disk_caching.directory == str(tmp_path)
        assert config.temp.directory == "/tmp"
        assert config.archive.compression == "stored"
        assert config.logging.level == "DEBUG"

    def test_unknown_compression_env_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ODPWRITER_COMPRESSION", "zstd")
        assert load_config(tmp_path / "absent.yaml").archive.compression == "deflated"

    def test_find_config_file_upward(self, tmp_path):
        (tmp_path / "odpwriter.yaml").write_text("{}\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == (tmp_path / "odpwriter.yaml").resolve()

    def test_find_config_file_hidden_dir(self, tmp_path):
        hidden = tmp_path / ".odpwriter"
        hidden.mkdir()
        (hidden / "odpwriter.yaml").write_text("{}\n")
        assert find_config_file(tmp_path) == (hidden / "odpwriter.yaml").resolve()

    def test_save_and_reload(self, tmp_path):
        config = WriterConfig()
        config.archive.compression = "stored"
        path = tmp_path / "conf" / "odpwriter.yaml"
        save_config(config, path)

        assert path.exists()
        assert load_config(path).archive.compression == "stored"


class TestGlobalConfig:

    def test_set_and_get(self):
        config = WriterConfig()
        set_config(config)
        assert get_config() is config

    def test_lazy_load(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        (tmp_path / "odpwriter.yaml").write_text("temp:\n  prefix: lazy\n")

        assert get_config().temp.prefix == "lazy"
