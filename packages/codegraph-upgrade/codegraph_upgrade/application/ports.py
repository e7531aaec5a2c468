"""
Ports (Interfaces)

Hexagonal Architecture의 핵심 인터페이스 정의.
Driver는 이 인터페이스만 알고, 실제 구현은 infrastructure가 제공한다.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from codegraph_upgrade.domain.change import UpgradeChange
from codegraph_upgrade.domain.source import Diagnostic
from codegraph_upgrade.domain.tree import CompilationSession

if TYPE_CHECKING:
    from codegraph_upgrade.domain.models import UpgradeState


# ========== Compile Results ==========


@dataclass(frozen=True)
class CompileResult:
    """Front end 결과 (ParseFailed | Compiled)"""

    diagnostics: tuple[Diagnostic, ...] = ()


@dataclass(frozen=True)
class ParseFailed(CompileResult):
    """트리를 전혀 만들 수 없음 (structural failure)"""


@dataclass(frozen=True)
class Compiled(CompileResult):
    """
    Trees were built, possibly with semantic diagnostics.

    Attributes:
        session: Tree handles of this compilation (disposable)
        discovered: Sources the front end pulled in through imports,
            {unit_id: text}, not part of the compiled input
    """

    session: CompilationSession | None = None
    discovered: Mapping[str, str] = field(default_factory=dict)


# ========== Front End ==========


class FrontEndPort(ABC):
    """
    컴파일러 front end 포트

    Lexing, parsing, name resolution and type checking live behind this
    port; the engine consumes it as an oracle.
    """

    @abstractmethod
    def compile(self, sources: Mapping[str, str]) -> CompileResult:
        """
        Compile all units.

        Args:
            sources: {unit_id: current text}

        Returns:
            ParseFailed or Compiled

        Raises:
            FrontEndError: the front end itself failed
        """
        pass


# ========== Persistence ==========


class SourceStorePort(ABC):
    """
    소스 읽기/쓰기 포트

    Attributes:
        skipped: Messages for inputs the last ``load`` passed over
    """

    skipped: Sequence[str] = ()

    @abstractmethod
    def load(self, paths: Sequence[str]) -> dict[str, str]:
        """
        Read the input files.

        Returns:
            {unit_id: text}

        Raises:
            InvalidInputError: missing/invalid inputs or no input at all
        """
        pass

    @abstractmethod
    def read(self, path: str) -> str:
        """
        Read an imported file.

        Raises:
            PathNotAllowedError: path outside the allowed directories
            SourceStoreError: not found / not a regular file
        """
        pass

    @abstractmethod
    def write(self, unit_id: str, text: str) -> None:
        """Overwrite the unit's backing file with ``text``."""
        pass


# ========== Reporting ==========


class UpgradeReporterPort(ABC):
    """
    진행 상황 / 결과 출력 포트

    Default implementations are no-ops so adapters override what they
    render.
    """

    def compiling(self) -> None:
        pass

    def diagnostics(self, diagnostics: Sequence[Diagnostic], resolvable: bool) -> None:
        pass

    def analyzing(self, unit_id: str, upgrading: bool) -> None:
        pass

    def findings_found(self, unit_id: str, count: int) -> None:
        pass

    def change(self, change: UpgradeChange, source: str, verbose: bool) -> None:
        pass

    def writing(self, unit_id: str) -> None:
        pass

    def failure(self, message: str) -> None:
        pass

    def finished(self, state: UpgradeState) -> None:
        pass


class NullReporter(UpgradeReporterPort):
    """출력 없음 (테스트/라이브러리 사용)"""
