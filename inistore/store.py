"""
설정 저장소

여러 INI 형식 설정 파일을 순서대로 병합하여 section → key → value 매핑으로
보관합니다. 리로드 스레드와 호출자 스레드가 동시에 접근할 수 있습니다.

설계 원칙:
- 매핑은 항상 통째로 교체 (키 단위 수정 없음)
- 읽기/교체 모두 단일 락으로 직렬화
- 호출자에게는 섹션 복사본(Config)만 반환

사용법:
    ```python
    store = IniStore()
    store.initialize("base.cfg", "local.cfg")

    db = store.must_get("database")
    port = db.get_int("port")
    ```
"""

import logging
import re
import threading
from pathlib import Path
from typing import IO

from .errors import (
    ConfigLoadError,
    NotInitializedError,
    SectionNotFoundError,
    ValueConversionError,
)
from .parser import copy_snapshot, merge_documents, parse_document
from .settings import StoreSettings
from .types import Document, Snapshot

logger = logging.getLogger(__name__)

# ASCII 10진 정수만 허용 (밑줄 구분자, 비ASCII 숫자 불가)
RE_INT = re.compile(r"[+-]?[0-9]+")


class Config(dict):
    """섹션 하나의 key → value 복사본

    저장소와 독립적이므로 수정해도 저장소에 영향이 없습니다.
    """

    def __init__(self, values: dict[str, str] | None = None, section: str = ""):
        super().__init__(values or {})
        self.section = section

    def _require(self, key: str, type_name: str) -> str:
        value = self.get(key)
        if value is None:
            raise ValueConversionError(self.section, key, None, type_name)
        return value

    def get_int(self, key: str) -> int:
        """정수 값 조회

        Raises:
            ValueConversionError: 키가 없거나 정수가 아닐 때
        """
        value = self._require(key, "int")
        if not RE_INT.fullmatch(value):
            raise ValueConversionError(self.section, key, value, "int")
        return int(value, 10)

    def get_float(self, key: str) -> float:
        """실수 값 조회

        Raises:
            ValueConversionError: 키가 없거나 실수가 아닐 때
        """
        value = self._require(key, "float")
        try:
            return float(value)
        except ValueError as e:
            raise ValueConversionError(self.section, key, value, "float") from e


class IniStore:
    """설정 저장소

    모든 설정은 이 클래스를 통해 접근합니다.
    자동 리로드(ReloadEngine) 시 통째로 교체됩니다.
    """

    def __init__(self, settings: StoreSettings | None = None):
        self.settings = settings or StoreSettings()
        self._lock = threading.Lock()
        self._config: Snapshot = {}
        self._paths: tuple[str, ...] = ()

    def initialize(self, *paths: str | Path) -> None:
        """설정 파일 로드

        없는 파일은 건너뛰고, 존재하지만 읽을 수 없는 파일은 ConfigLoadError를
        발생시킵니다. 실패 시 기존 매핑은 그대로 유지됩니다.

        Args:
            paths: 설정 파일 경로 (뒤의 파일이 앞의 값을 덮어씀)

        Raises:
            ConfigLoadError: 존재하는 파일 읽기 실패
        """
        recorded = tuple(str(path) for path in paths)
        with self._lock:
            self._paths = recorded

        documents = []
        for path in recorded:
            document = self._read_file(path)
            if document is not None:
                documents.append(document)

        merged = merge_documents(*documents)
        with self._lock:
            self._config = merged

        logger.info(
            f"[IniStore] 설정 로드 완료: {len(documents)}/{len(recorded)}개 파일, "
            f"{len(merged)}개 섹션"
        )

    def reinitialize(self) -> None:
        """기존 경로 목록으로 다시 로드

        Raises:
            NotInitializedError: initialize가 호출된 적 없을 때
            ConfigLoadError: 존재하는 파일 읽기 실패
        """
        with self._lock:
            paths = self._paths
        if not paths:
            raise NotInitializedError("not init: 설정 파일 경로가 없음")
        self.initialize(*paths)

    def _read_file(self, path: str) -> Document | None:
        """파일 하나 파싱 (없으면 None)"""
        try:
            with open(path, encoding=self.settings.encoding) as f:
                content = f.read()
        except FileNotFoundError:
            logger.debug(f"[IniStore] 설정 파일 없음, 건너뜀: {path}")
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"[IniStore] 설정 파일 읽기 실패: {path} - {e}")
            raise ConfigLoadError(path, str(e)) from e

        return parse_document(content, source=path)

    def load_text(self, text: str, source: str = "<string>") -> None:
        """텍스트를 파싱하여 현재 설정 위에 병합"""
        document = parse_document(text, source=source)
        with self._lock:
            self._config = merge_documents(self._config, document)
        logger.info(f"[IniStore] 설정 병합 완료: {source}, {len(document)}개 섹션")

    def load_stream(self, stream: IO, source: str | None = None) -> None:
        """스트림 전체를 읽어 현재 설정 위에 병합

        Raises:
            ConfigLoadError: 스트림 읽기 또는 디코딩 실패
        """
        source = source or getattr(stream, "name", "<stream>")
        try:
            content = stream.read()
            if isinstance(content, bytes):
                content = content.decode(self.settings.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigLoadError(str(source), str(e)) from e

        self.load_text(content, source=str(source))

    def reset(self) -> None:
        """빈 설정으로 교체하고 경로 목록 삭제"""
        with self._lock:
            self._config = {}
            self._paths = ()

    def get(self, section: str) -> Config | None:
        """섹션 복사본 조회

        Returns:
            Config 또는 None (섹션 없음)
        """
        section = section.strip()
        with self._lock:
            values = self._config.get(section)
            if values is None:
                return None
            return Config(values, section=section)

    def must_get(self, section: str) -> Config:
        """섹션 복사본 조회 (없으면 예외)

        Raises:
            SectionNotFoundError: 섹션 없음
        """
        config = self.get(section)
        if config is None:
            raise SectionNotFoundError(section.strip())
        return config

    def sections(self) -> set[str]:
        """현재 섹션 이름 목록"""
        with self._lock:
            return set(self._config)

    def snapshot(self) -> Snapshot:
        """전체 설정 복사본"""
        with self._lock:
            return copy_snapshot(self._config)

    @property
    def paths(self) -> tuple[str, ...]:
        """initialize에 전달된 경로 목록"""
        with self._lock:
            return self._paths
