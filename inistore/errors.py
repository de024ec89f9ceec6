"""
에러 분류 시스템

설정 저장소에서 발생하는 에러를 심각도(복구 가능 / 치명적)로 분류합니다.

분류 기준:
- 복구 가능: 호출자가 무시하거나 대체 값을 선택할 수 있는 에러
- 치명적: 신뢰할 수 없는 설정으로 계속 진행하면 안 되는 에러
"""

from enum import Enum


class ErrorSeverity(str, Enum):
    """에러 심각도"""

    RECOVERABLE = "recoverable"  # 섹션 없음(get), 타입 변환 실패, 미초기화
    FATAL = "fatal"  # 파일 읽기 실패, 중복 자동 리로드, must_get 실패
    UNKNOWN = "unknown"


class InistoreError(Exception):
    """inistore 기본 에러"""

    severity = ErrorSeverity.UNKNOWN

    def __init__(self, message: str, severity: ErrorSeverity | None = None):
        super().__init__(message)
        if severity is not None:
            self.severity = severity


class ConfigLoadError(InistoreError):
    """존재하는 설정 파일을 읽을 수 없음"""

    severity = ErrorSeverity.FATAL

    def __init__(self, path: str, reason: str):
        super().__init__(f"설정 파일 로드 실패: {path} - {reason}")
        self.path = path


class NotInitializedError(InistoreError):
    """초기화 경로 없이 재초기화 시도"""

    severity = ErrorSeverity.RECOVERABLE


class SectionNotFoundError(InistoreError, KeyError):
    """필수 섹션 없음"""

    severity = ErrorSeverity.FATAL

    def __init__(self, section: str):
        super().__init__(f"section {section} not found")
        self.section = section

    def __str__(self) -> str:
        # KeyError는 메시지를 repr로 감싸므로 원문 유지
        return self.args[0]


class ValueConversionError(InistoreError, ValueError):
    """설정 값 타입 변환 실패"""

    severity = ErrorSeverity.RECOVERABLE

    def __init__(self, section: str, key: str, value: str | None, type_name: str):
        if value is None:
            message = f"[{section}] {key}: 키 없음 ({type_name} 변환 불가)"
        else:
            message = f"[{section}] {key}: {value!r}는 올바른 {type_name} 값이 아님"
        super().__init__(message)
        self.section = section
        self.key = key
        self.value = value


class AutoReloadActiveError(InistoreError):
    """자동 리로드가 이미 실행 중"""

    severity = ErrorSeverity.FATAL


class ErrorClassifier:
    """에러 분류기"""

    @classmethod
    def classify(cls, error: Exception) -> ErrorSeverity:
        """에러를 분류하여 심각도 반환

        Args:
            error: 분류할 예외 객체

        Returns:
            ErrorSeverity: 에러 심각도
        """
        if isinstance(error, InistoreError):
            return error.severity

        # 예외 타입 기반 분류
        if isinstance(error, (OSError, UnicodeError)):
            return ErrorSeverity.FATAL

        if isinstance(error, (ValueError, KeyError)):
            return ErrorSeverity.RECOVERABLE

        return ErrorSeverity.UNKNOWN

    @classmethod
    def is_fatal(cls, error: Exception) -> bool:
        """치명적 에러 여부"""
        return cls.classify(error) == ErrorSeverity.FATAL

    @classmethod
    def format_message(
        cls, error: Exception, include_traceback: bool = False
    ) -> str:
        """에러 메시지 포맷팅

        Args:
            error: 포맷팅할 예외 객체
            include_traceback: 상세 스택 트레이스 포함 여부

        Returns:
            str: 심각도 라벨이 포함된 에러 메시지
        """
        severity = cls.classify(error)
        label = {
            ErrorSeverity.RECOVERABLE: "[복구 가능]",
            ErrorSeverity.FATAL: "[치명적]",
            ErrorSeverity.UNKNOWN: "[분류되지 않음]",
        }

        message = f"{label[severity]} {type(error).__name__}: {str(error)}"

        if include_traceback:
            import traceback

            message += f"\n\n상세 정보:\n{traceback.format_exc()}"

        return message
