"""
Collector Helpers

glob 탐색, URL 결합, Content-Type 추론
"""

import glob
import mimetypes
import os
from pathlib import Path
from typing import Callable, Iterator

DEFAULT_CONTENT_TYPE = "application/octet-stream"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"

# mimetypes가 모르는 빌드 로그 확장자
_TEXT_EXTENSIONS = {".log", ".txt", ".out"}


def content_type_for_file_name(name: str) -> str:
    """파일 확장자로 Content-Type 추론"""
    ext = Path(name).suffix.lower()
    if ext in _TEXT_EXTENSIONS:
        return TEXT_CONTENT_TYPE
    content_type, _ = mimetypes.guess_type(name)
    return content_type or DEFAULT_CONTENT_TYPE


def url_join(*parts: str) -> str:
    """슬래시 하나로 URL 조각 결합"""
    cleaned = [p for p in parts if p]
    if not cleaned:
        return ""
    head = cleaned[0].rstrip("/")
    tail = [p.strip("/") for p in cleaned[1:] if p.strip("/")]
    return "/".join([head] + tail)


def iter_glob_files(pattern: str) -> Iterator[str]:
    """
    glob 패턴에 매칭되는 파일 경로를 지연 열거

    디렉토리가 매칭되면 그 하위 파일을 재귀적으로 모두 반환합니다.
    """
    for match in glob.iglob(pattern, recursive=True):
        if os.path.isdir(match):
            for root, dirs, files in os.walk(match):
                dirs.sort()
                for name in sorted(files):
                    yield os.path.join(root, name)
        else:
            yield match


def glob_all_files(pattern: str, fn: Callable[[str], None]) -> None:
    """매칭된 각 파일에 대해 fn 호출. fn의 예외는 그대로 전파"""
    for path in iter_glob_files(pattern):
        fn(path)


def object_name_for(path: str, output_path: str = "", base_dir: str = "") -> str:
    """
    로컬 파일 경로를 오브젝트 이름으로 변환

    Args:
        path: 매칭된 파일 경로
        output_path: 오브젝트 이름 접두사
        base_dir: 제거할 기준 디렉토리

    Returns:
        슬래시로 결합된 오브젝트 이름
    """
    name = path
    if base_dir:
        name = os.path.relpath(path, base_dir)
    name = Path(name).as_posix()
    if output_path:
        name = url_join(Path(output_path).as_posix(), name)
    return name
