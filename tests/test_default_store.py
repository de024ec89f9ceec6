"""
기본 저장소 모듈 함수 테스트

init / get / must_get / sections / open_auto_reload / close_auto_reload.
"""

import os
import time
from pathlib import Path

import pytest

import inistore
from inistore import (
    AutoReloadActiveError,
    ConfigurationError,
    NotInitializedError,
    SectionNotFoundError,
)
from tests.sample_data import random_name, update_name, wait_until


class TestDefaultStore:
    """기본 저장소 테스트"""

    def test_init_and_read(self, sample_file: Path):
        inistore.init(sample_file)

        assert inistore.sections() == {"section1", "section2"}
        section1 = inistore.must_get("section1")
        assert section1.get_float("height") == 180.1
        assert section1.get_int("age") == 20
        assert inistore.get("missing") is None

    def test_must_get_missing(self, sample_file: Path):
        inistore.init(sample_file)

        with pytest.raises(SectionNotFoundError):
            inistore.must_get("missing")

    def test_init_from_environment(self, monkeypatch, sample_file: Path, override_file: Path):
        """경로 없이 init 하면 INISTORE_FILES 사용"""
        paths = [str(sample_file), str(override_file)]
        monkeypatch.setenv("INISTORE_FILES", os.pathsep.join(paths))

        inistore.init()

        assert inistore.must_get("section1")["age"] == "21"

    def test_init_applies_environment_settings(self, monkeypatch, tmp_path: Path):
        """INISTORE_ENCODING, INISTORE_POLL_INTERVAL이 기본 저장소에 적용됨"""
        path = tmp_path / "latin.cfg"
        path.write_bytes("[profile]\ncity = Montr\u00e9al\n".encode("latin-1"))
        monkeypatch.setenv("INISTORE_FILES", str(path))
        monkeypatch.setenv("INISTORE_ENCODING", "latin-1")
        monkeypatch.setenv("INISTORE_POLL_INTERVAL", "0.5")

        inistore.init()

        assert inistore.must_get("profile")["city"] == "Montr\u00e9al"
        assert inistore.default_store.settings.encoding == "latin-1"
        assert inistore.open_auto_reload().interval == 0.5

    def test_init_rejects_invalid_environment(self, monkeypatch, sample_file: Path):
        monkeypatch.setenv("INISTORE_POLL_INTERVAL", "0")

        with pytest.raises(ConfigurationError):
            inistore.init(sample_file)

    def test_reinit_without_init(self):
        with pytest.raises(NotInitializedError):
            inistore.reinit()

    def test_reinit(self, sample_file: Path):
        inistore.init(sample_file)
        sample_file.write_text("[only]\nk = v\n", encoding="utf-8")

        inistore.reinit()

        assert inistore.sections() == {"only"}


class TestDefaultAutoReload:
    """기본 저장소 자동 리로드 테스트"""

    def test_open_auto_reload(self, sample_file: Path):
        received = []
        inistore.init(sample_file)
        inistore.open_auto_reload(
            lambda section, key, value: received.append((section, key, value)),
            interval=0.05,
        )
        time.sleep(0.2)

        name = random_name()
        update_name(sample_file, name)

        assert wait_until(lambda: received == [("section1", "name", name)])
        assert inistore.must_get("section1")["name"] == name

    def test_open_twice_fails(self, sample_file: Path):
        inistore.init(sample_file)
        inistore.open_auto_reload(interval=0.05)

        with pytest.raises(AutoReloadActiveError):
            inistore.open_auto_reload(interval=0.05)

    def test_close_then_reopen(self, sample_file: Path):
        inistore.init(sample_file)
        engine = inistore.open_auto_reload(interval=0.05)

        inistore.close_auto_reload()
        assert not engine.is_running

        inistore.open_auto_reload(interval=0.05)
        assert inistore.active_engine() is not None

    def test_close_without_open(self):
        inistore.close_auto_reload()

        assert inistore.active_engine() is None
