"""
inistore: 핫 리로드 지원 INI 형식 설정 저장소

IniStore로 설정을 로드하고, ReloadEngine으로 파일 변경 시 자동 리로드합니다.
프로세스 하나에 저장소 하나를 쓰는 경우 모듈 함수(init, get, must_get ...)로
기본 저장소(default_store)에 접근할 수 있습니다.

사용법:
    ```python
    import inistore

    inistore.init("app.cfg", "app.local.cfg")
    height = inistore.must_get("profile").get_float("height")

    inistore.open_auto_reload(lambda section, key, value: ...)
    ```
"""

from pathlib import Path

from .errors import (
    AutoReloadActiveError,
    ConfigLoadError,
    ErrorClassifier,
    ErrorSeverity,
    InistoreError,
    NotInitializedError,
    SectionNotFoundError,
    ValueConversionError,
)
from .parser import copy_snapshot, merge_documents, parse_document
from .reloader import ChangeCallback, ReloadEngine, active_engine, diff_snapshots
from .settings import ConfigurationError, StoreSettings
from .store import Config, IniStore
from .tokenizer import tokenize_line
from .types import ChangeEvent, LineKind, ParsedLine

default_store = IniStore()

_engine: ReloadEngine | None = None


def init(*paths: str | Path, env_file: str | Path | None = None) -> None:
    """기본 저장소 초기화

    환경변수(INISTORE_*) 설정을 검증하여 기본 저장소에 적용합니다.
    경로가 없으면 INISTORE_FILES를 사용합니다.

    Raises:
        ConfigurationError: 환경변수 설정값 오류
        ConfigLoadError: 존재하는 파일 읽기 실패
    """
    settings = StoreSettings.from_env_validated(env_file)
    default_store.settings = settings
    if not paths:
        paths = tuple(settings.files)
    default_store.initialize(*paths)


def reinit() -> None:
    """기본 저장소 재초기화"""
    default_store.reinitialize()


def get(section: str) -> Config | None:
    return default_store.get(section)


def must_get(section: str) -> Config:
    return default_store.must_get(section)


def sections() -> set[str]:
    return default_store.sections()


def open_auto_reload(
    callback: ChangeCallback | None = None, interval: float | None = None
) -> ReloadEngine:
    """기본 저장소 자동 리로드 시작

    Raises:
        AutoReloadActiveError: 이미 실행 중일 때
    """
    global _engine
    engine = ReloadEngine(default_store, interval=interval)
    engine.start(callback)
    _engine = engine
    return engine


def close_auto_reload() -> None:
    """기본 저장소 자동 리로드 중지 요청"""
    global _engine
    if _engine is not None:
        _engine.stop()
        _engine = None


__all__ = [
    # Store
    "Config",
    "IniStore",
    "default_store",
    # Reload
    "ChangeCallback",
    "ChangeEvent",
    "ReloadEngine",
    "active_engine",
    "diff_snapshots",
    # Parsing
    "LineKind",
    "ParsedLine",
    "copy_snapshot",
    "merge_documents",
    "parse_document",
    "tokenize_line",
    # Settings
    "ConfigurationError",
    "StoreSettings",
    # Errors
    "AutoReloadActiveError",
    "ConfigLoadError",
    "ErrorClassifier",
    "ErrorSeverity",
    "InistoreError",
    "NotInitializedError",
    "SectionNotFoundError",
    "ValueConversionError",
    # Default store
    "close_auto_reload",
    "get",
    "init",
    "must_get",
    "open_auto_reload",
    "reinit",
    "sections",
]
