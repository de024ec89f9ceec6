"""
저장소 설정

환경변수 기반 설정 관리. .env 파일이 있으면 python-dotenv로 먼저 로드합니다.
"""

import codecs
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_ENCODING = "utf-8"


class ConfigurationError(Exception):
    """설정 오류 예외"""

    pass


@dataclass
class StoreSettings:
    """저장소 설정"""

    # 폴링 설정
    poll_interval: float = DEFAULT_POLL_INTERVAL  # 파일 변경 확인 주기 (초)

    # 파일 읽기
    encoding: str = DEFAULT_ENCODING

    # 기본 설정 파일 목록 (순서대로 병합)
    files: list[str] = field(default_factory=list)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "StoreSettings":
        """환경변수에서 설정 로드

        Args:
            env_file: 먼저 로드할 .env 파일 경로 (기존 환경변수가 우선)
        """
        if env_file is not None and Path(env_file).exists():
            load_dotenv(env_file, override=False)

        # 형식: "base.cfg:local.cfg" (Windows는 ";")
        files_str = os.getenv("INISTORE_FILES", "")
        files = [path.strip() for path in files_str.split(os.pathsep) if path.strip()]

        return cls(
            poll_interval=float(
                os.getenv("INISTORE_POLL_INTERVAL", str(DEFAULT_POLL_INTERVAL))
            ),
            encoding=os.getenv("INISTORE_ENCODING", DEFAULT_ENCODING),
            files=files,
        )

    def validate(self, strict: bool = True) -> list[str]:
        """설정값 검증

        Args:
            strict: True면 오류 시 예외 발생, False면 경고만

        Returns:
            list[str]: 검증 경고/오류 메시지 목록

        Raises:
            ConfigurationError: strict=True이고 오류가 있을 때
        """
        errors = []
        warnings = []

        if self.poll_interval <= 0:
            errors.append(f"폴링 간격은 0보다 커야 함: {self.poll_interval}초")
        elif self.poll_interval < 0.1:
            warnings.append(f"폴링 간격이 너무 짧음: {self.poll_interval}초")

        try:
            codecs.lookup(self.encoding)
        except LookupError:
            errors.append(f"알 수 없는 인코딩: {self.encoding}")

        for path in self.files:
            if not Path(path).exists():
                warnings.append(f"설정 파일 없음 (건너뜀): {path}")

        for warning in warnings:
            logger.warning(f"[Settings] {warning}")

        if errors:
            for error in errors:
                logger.error(f"[Settings] {error}")
            if strict:
                raise ConfigurationError(
                    f"설정 검증 실패: {len(errors)}개 오류\n" + "\n".join(errors)
                )

        return errors + warnings

    @classmethod
    def from_env_validated(
        cls, env_file: str | Path | None = None, strict: bool = True
    ) -> "StoreSettings":
        """환경변수에서 설정 로드 및 검증"""
        settings = cls.from_env(env_file)
        settings.validate(strict=strict)
        return settings
