"""
설정 파일 라인 토크나이저

한 줄을 빈 줄 / 섹션 헤더 / key=value / 형식 오류로 분류합니다.
상태와 I/O가 없는 순수 함수입니다.
"""

import logging
import re

from .types import LineKind, ParsedLine

logger = logging.getLogger(__name__)

COMMENT_FLAG = "#"

RE_SECTION = re.compile(r"\[(.+)\]")
RE_KEY_VALUE = re.compile(r".+=.+")


def strip_comment(line: str) -> str:
    """첫 번째 주석 문자부터 줄 끝까지 제거"""
    index = line.find(COMMENT_FLAG)
    if index != -1:
        return line[:index]
    return line


def tokenize_line(line: str, source: str | None = None) -> ParsedLine:
    """한 줄 분류

    Args:
        line: 원본 라인 (개행 문자 제외)
        source: 진단 메시지에 표시할 출처 (파일 경로 등)

    Returns:
        ParsedLine: 분류 결과. 형식 오류 라인은 경고 로그만 남깁니다.
    """
    content = strip_comment(line).strip()
    if not content:
        return ParsedLine(LineKind.BLANK, raw=line)

    match = RE_SECTION.fullmatch(content)
    if match:
        # 섹션 이름은 양끝 공백만 제거 (내부 공백 유지), 공백뿐이면 빈 이름
        return ParsedLine(LineKind.SECTION, section=match.group(1).strip(), raw=line)

    if RE_KEY_VALUE.fullmatch(content):
        key, value = content.split("=", 1)
        return ParsedLine(
            LineKind.KEY_VALUE, key=key.strip(), value=value.strip(), raw=line
        )

    logger.warning(f"[Parser] 형식 오류 라인 무시: {line!r} ({source or '<string>'})")
    return ParsedLine(LineKind.MALFORMED, raw=line)
