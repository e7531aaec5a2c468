"""
File Source Store

입력 파일 읽기, import 읽기 (allow-list 검사), 변경된 unit 덮어쓰기.

Unit ids are the paths as given (POSIX separators). Files are read and
written as UTF-8 without newline translation so offsets stay stable.
"""

from collections.abc import Sequence
from pathlib import Path

from codegraph_upgrade.application.ports import SourceStorePort
from codegraph_upgrade.common.exceptions import InvalidInputError, PathNotAllowedError, SourceStoreError
from codegraph_upgrade.common.logging_config import get_logger

logger = get_logger(__name__)

ALLOW_ALL = "*"


class FileSourceStore(SourceStorePort):
    """
    파일 시스템 기반 SourceStore

    Args:
        allowed_directories: import 허용 디렉토리 (비어 있거나 "*" 포함 시 제한 없음)
        ignore_missing: 없는/잘못된 입력 파일을 건너뛸지
    """

    def __init__(self, allowed_directories: Sequence[str] = (), ignore_missing: bool = False):
        self.allow_all = not allowed_directories or ALLOW_ALL in allowed_directories
        self.allowed_directories = [
            Path(d).resolve() for d in allowed_directories if d and d != ALLOW_ALL
        ]
        self.ignore_missing = ignore_missing
        self.skipped: list[str] = []

    def load(self, paths: Sequence[str]) -> dict[str, str]:
        sources: dict[str, str] = {}
        self.skipped = []

        for path in paths:
            infile = Path(path)
            if not infile.exists():
                self._reject(f'"{path}" is not found.')
                continue
            if not infile.is_file():
                self._reject(f'"{path}" is not a valid file.')
                continue
            sources[infile.as_posix()] = self._read_file(infile)

        if not sources:
            raise InvalidInputError(
                "No input files given. If you wish to use the standard input please specify \"-\" explicitly."
            )

        logger.info("sources_loaded", count=len(sources), skipped=len(self.skipped))
        return sources

    def read(self, path: str) -> str:
        candidate = Path(path)
        if not self.is_allowed(candidate):
            raise PathNotAllowedError("File outside of allowed directories.", details={"path": path})
        if not candidate.exists():
            raise SourceStoreError("File not found.", details={"path": path})
        if not candidate.is_file():
            raise SourceStoreError("Not a valid file.", details={"path": path})
        return self._read_file(candidate)

    def write(self, unit_id: str, text: str) -> None:
        try:
            with open(unit_id, "w", encoding="utf-8", newline="") as f:
                f.write(text)
        except OSError as e:
            raise SourceStoreError(f"Cannot write to input file {unit_id}", details={"error": str(e)}) from e
        logger.info("unit_written", unit=unit_id, length=len(text))

    def is_allowed(self, path: Path) -> bool:
        if self.allow_all:
            return True
        resolved = path.resolve()
        return any(resolved == d or d in resolved.parents for d in self.allowed_directories)

    def _reject(self, message: str) -> None:
        if not self.ignore_missing:
            raise InvalidInputError(message)
        logger.warning("input_skipped", reason=message)
        self.skipped.append(f"{message[:-1]}. Skipping.")

    @staticmethod
    def _read_file(path: Path) -> str:
        try:
            with open(path, encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise SourceStoreError(f"Cannot read {path.as_posix()}", details={"error": str(e)}) from e
