"""
공용 타입 정의

라인 분류 Enum, 파싱 결과 및 변경 이벤트 Dataclass.
"""

from dataclasses import dataclass
from enum import Enum

# section → key → value
Document = dict[str, dict[str, str]]
Snapshot = dict[str, dict[str, str]]


class LineKind(str, Enum):
    """설정 파일 한 줄의 분류"""

    BLANK = "blank"
    SECTION = "section"
    KEY_VALUE = "key_value"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class ParsedLine:
    """토크나이저 결과

    kind에 따라 section 또는 key/value 중 하나만 채워집니다.
    """

    kind: LineKind
    section: str | None = None
    key: str | None = None
    value: str | None = None
    raw: str = ""


@dataclass(frozen=True)
class ChangeEvent:
    """리로드 시 감지된 키 변경"""

    section: str
    key: str
    value: str
