"""
설정 문서 파서

파일 하나의 전체 텍스트를 section → key → value 매핑으로 변환합니다.

규칙:
- 섹션이 열리기 전의 key=value 라인은 버림 (기본 섹션 없음)
- 이름이 공백뿐인 섹션(`[   ]`) 아래의 key=value 라인도 버림
- 같은 섹션이 다시 열리면 기존 매핑에 계속 누적
- 같은 키는 마지막 값 우선
"""

import re

from .tokenizer import tokenize_line
from .types import Document, LineKind, Snapshot

RE_LINE_BREAK = re.compile(r"[\r\n]+")


def split_lines(text: str) -> list[str]:
    """CR/LF 혼용 텍스트를 비어있지 않은 라인으로 분리"""
    return [line for line in RE_LINE_BREAK.split(text) if line]


def parse_document(text: str, source: str | None = None) -> Document:
    """문서 파싱

    Args:
        text: 파일 전체 내용
        source: 진단 메시지용 출처

    Returns:
        Document: section → key → value 매핑
    """
    document: Document = {}
    current: str | None = None

    for line in split_lines(text):
        parsed = tokenize_line(line, source=source)

        if parsed.kind == LineKind.SECTION:
            # 이름 없는 섹션 뒤의 키는 다음 섹션이 열릴 때까지 버림
            current = parsed.section or None
            if current is not None:
                document.setdefault(current, {})

        elif parsed.kind == LineKind.KEY_VALUE and current is not None:
            document[current][parsed.key] = parsed.value

    return document


def copy_snapshot(mapping: Snapshot) -> Snapshot:
    """2단계 매핑 구조 복사"""
    return {section: dict(values) for section, values in mapping.items()}


def merge_documents(*documents: Document) -> Snapshot:
    """문서 병합 (뒤의 문서가 같은 키를 덮어씀)"""
    merged: Snapshot = {}
    for document in documents:
        for section, values in document.items():
            merged.setdefault(section, {}).update(values)
    return merged
