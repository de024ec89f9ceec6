"""
Pytest 설정 및 공통 Fixture
"""

from pathlib import Path

import pytest

import inistore
from inistore import IniStore, StoreSettings, active_engine
from tests.sample_data import SAMPLE_CONFIG, SAMPLE_OVERRIDE


@pytest.fixture(autouse=True)
def stop_auto_reload():
    """테스트 종료 후 실행 중인 자동 리로드 정리

    엔진은 프로세스 전체에서 하나만 허용되므로 테스트 간 누수를 막습니다.
    """
    yield
    inistore.close_auto_reload()
    engine = active_engine()
    if engine is not None:
        engine.stop()
        engine.join(timeout=2.0)
    inistore.default_store.reset()
    inistore.default_store.settings = StoreSettings()


@pytest.fixture
def settings() -> StoreSettings:
    """테스트용 StoreSettings (짧은 폴링 주기)"""
    return StoreSettings(poll_interval=0.05)


@pytest.fixture
def store(settings: StoreSettings) -> IniStore:
    """빈 IniStore"""
    return IniStore(settings)


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """기본 샘플 설정 파일"""
    path = tmp_path / "t1.cfg"
    path.write_text(SAMPLE_CONFIG, encoding="utf-8")
    return path


@pytest.fixture
def override_file(tmp_path: Path) -> Path:
    """덮어쓰기용 로컬 설정 파일"""
    path = tmp_path / "t1.local.cfg"
    path.write_text(SAMPLE_OVERRIDE, encoding="utf-8")
    return path


@pytest.fixture
def loaded_store(store: IniStore, sample_file: Path) -> IniStore:
    """샘플 파일로 초기화된 IniStore"""
    store.initialize(sample_file)
    return store
