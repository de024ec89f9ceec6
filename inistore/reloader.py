"""
파일 변경 폴링 기반 자동 리로드

백그라운드 스레드가 주기적으로 설정 파일의 수정 시각을 확인하고,
변경되면 저장소를 다시 로드한 뒤 변경된 키마다 콜백을 호출합니다.

동작 규칙:
- 프로세스 전체에서 동시에 하나의 엔진만 실행 가능 (중복 start는 예외)
- stop은 중지 플래그만 설정 (스레드 종료를 기다리지 않음)
- 처음 관찰한 파일은 기준 시각만 기록하고 리로드하지 않음
- 리로드 전에 존재하던 섹션 안의 추가/변경 키만 보고
  (새 섹션, 삭제된 키는 보고하지 않음)

사용법:
    ```python
    store = IniStore()
    store.initialize("app.cfg")

    engine = ReloadEngine(store)
    engine.start(lambda section, key, value: print(section, key, value))

    # 앱 종료 시
    engine.stop()
    ```
"""

import logging
import os
import threading
from typing import Callable

from .errors import AutoReloadActiveError, ErrorClassifier
from .settings import ConfigurationError
from .store import IniStore
from .types import ChangeEvent, Snapshot

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[str, str, str], None]

# 프로세스 전체에서 실행 중인 엔진
_active_lock = threading.Lock()
_active_engine: "ReloadEngine | None" = None


def diff_snapshots(before: Snapshot, after: Snapshot) -> list[ChangeEvent]:
    """리로드 전후 비교

    before에 있던 섹션만 비교하며, after 기준으로 값이 새로 생기거나
    달라진 키를 반환합니다.
    """
    events = []
    for section, values in after.items():
        old_values = before.get(section)
        if old_values is None:
            continue
        for key, value in values.items():
            if key not in old_values or old_values[key] != value:
                events.append(ChangeEvent(section, key, value))
    return events


def active_engine() -> "ReloadEngine | None":
    """현재 실행 중인 엔진"""
    with _active_lock:
        return _active_engine


class ReloadEngine:
    """설정 파일 자동 리로드 엔진"""

    def __init__(self, store: IniStore, interval: float | None = None):
        """
        Args:
            store: 리로드할 IniStore 인스턴스
            interval: 폴링 주기 (초), 기본값은 store.settings.poll_interval

        Raises:
            ConfigurationError: 폴링 주기가 0 이하일 때
        """
        self.store = store
        if interval is None:
            interval = store.settings.poll_interval
        if interval <= 0:
            raise ConfigurationError(f"폴링 간격은 0보다 커야 함: {interval}초")
        self.interval = interval
        self._callback: ChangeCallback | None = None
        self._stop_event: threading.Event | None = None
        self._thread: threading.Thread | None = None

    def start(self, callback: ChangeCallback | None = None) -> None:
        """자동 리로드 시작

        Args:
            callback: 변경된 키마다 (section, key, new_value)로 호출

        Raises:
            AutoReloadActiveError: 이미 실행 중인 엔진이 있을 때
        """
        global _active_engine
        with _active_lock:
            if _active_engine is not None:
                raise AutoReloadActiveError(
                    "already open autoload: 자동 리로드가 이미 실행 중"
                )
            _active_engine = self

        self._callback = callback
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._poll_loop,
            args=(self._stop_event,),
            daemon=True,
            name="inistore-reload",
        )
        self._thread.start()
        logger.info(f"[ReloadEngine] 자동 리로드 시작: 주기 {self.interval}초")

    def stop(self) -> None:
        """자동 리로드 중지 요청

        폴링 스레드는 현재 주기를 마친 뒤 종료됩니다.
        """
        global _active_engine
        with _active_lock:
            if _active_engine is not self:
                return
            _active_engine = None

        if self._stop_event:
            self._stop_event.set()
        logger.info("[ReloadEngine] 자동 리로드 중지 요청")

    def join(self, timeout: float | None = None) -> bool:
        """폴링 스레드 종료 대기

        Returns:
            bool: 스레드가 종료되었으면 True
        """
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    @property
    def is_running(self) -> bool:
        """Watching 상태 여부"""
        return self._stop_event is not None and not self._stop_event.is_set()

    def _poll_loop(self, stop_event: threading.Event) -> None:
        """폴링 루프

        워터마크 테이블은 실행 단위로 새로 만들어집니다.
        """
        watermarks: dict[str, int] = {}

        logger.debug("[ReloadEngine] 폴링 루프 시작")

        while not stop_event.is_set():
            try:
                self._poll_once(watermarks)
            except Exception as e:
                logger.error(
                    f"[ReloadEngine] 리로드 실패: {ErrorClassifier.format_message(e)}",
                    exc_info=True,
                )

            # 폴링 주기만큼 대기 (stop 시 즉시 깨어남)
            stop_event.wait(self.interval)

        logger.debug("[ReloadEngine] 폴링 루프 종료")

    def _poll_once(self, watermarks: dict[str, int]) -> list[ChangeEvent]:
        """한 주기 처리

        변경된 파일이 하나라도 있으면 리로드를 한 번 수행하고,
        성공한 경우에만 해당 파일의 워터마크를 갱신합니다.
        """
        changed: dict[str, int] = {}

        for path in self.store.paths:
            try:
                mtime_ns = os.stat(path).st_mtime_ns
            except OSError:
                continue

            last_mtime_ns = watermarks.get(path)
            if last_mtime_ns is None:
                watermarks[path] = mtime_ns
                logger.debug(f"[ReloadEngine] 기준 시각 기록: {path}")
            elif mtime_ns > last_mtime_ns:
                changed[path] = mtime_ns

        if not changed:
            return []

        logger.info(f"[ReloadEngine] 파일 변경 감지: {list(changed)}")
        events = self.reload_now()
        watermarks.update(changed)
        return events

    def reload_now(self) -> list[ChangeEvent]:
        """리로드 1회 수행

        Returns:
            list[ChangeEvent]: 보고된 변경 목록

        Raises:
            NotInitializedError: 저장소가 초기화되지 않았을 때
            ConfigLoadError: 존재하는 파일 읽기 실패
        """
        before = self.store.snapshot()
        self.store.reinitialize()
        after = self.store.snapshot()

        events = diff_snapshots(before, after)
        logger.info(f"[ReloadEngine] 리로드 완료: {len(events)}개 키 변경")

        if self._callback is None:
            return events

        # 콜백 호출
        for event in events:
            try:
                self._callback(event.section, event.key, event.value)
            except Exception as e:
                logger.error(
                    f"[ReloadEngine] 콜백 실행 실패: [{event.section}] {event.key} - {e}"
                )

        return events
