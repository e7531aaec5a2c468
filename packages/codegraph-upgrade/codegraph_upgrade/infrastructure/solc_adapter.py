"""
Solc Front End Adapter - Real subprocess Implementation

solc ``--standard-json``을 호출해 AST와 진단을 얻는다.

Imports solc cannot find are requested through the read callback and the
compilation is retried with them as additional sources; those sources are
reported back as discovered units.
"""

import json
import re
import subprocess
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from codegraph_upgrade.application.ports import Compiled, CompileResult, FrontEndPort, ParseFailed
from codegraph_upgrade.common.exceptions import CompilerNotFoundError, FrontEndError, SourceStoreError
from codegraph_upgrade.common.logging_config import get_logger
from codegraph_upgrade.domain.tree import CompilationSession

from .solc_ast import SolcAstReader

logger = get_logger(__name__)

_MISSING_SOURCE = re.compile(r'Source "([^"]+)" not found')


class SolcFrontEnd(FrontEndPort):
    """
    Solc Front End (Real Implementation)

    Args:
        binary: solc 실행 파일
        allow_paths: ``--allow-paths`` 디렉토리
        base_path: ``--base-path`` (None = 지정 안 함)
        evm_version: settings.evmVersion (None = 컴파일러 기본값)
        read_callback: import 파일 읽기 (path → text)
        timeout: 컴파일 1회 제한 시간 (초)
        max_import_rounds: import 해석 재시도 횟수
    """

    def __init__(
        self,
        binary: str = "solc",
        allow_paths: Sequence[str] = (),
        base_path: str | None = None,
        evm_version: str | None = None,
        read_callback: Callable[[str], str] | None = None,
        timeout: float = 60.0,
        max_import_rounds: int = 16,
    ):
        self.binary = binary
        self.allow_paths = list(allow_paths)
        self.base_path = base_path
        self.evm_version = evm_version
        self.read_callback = read_callback
        self.timeout = timeout
        self.max_import_rounds = max_import_rounds

    def compile(self, sources: Mapping[str, str]) -> CompileResult:
        sources = dict(sources)
        discovered: dict[str, str] = {}
        unreadable: set[str] = set()

        output = self._run(sources)
        for _ in range(self.max_import_rounds):
            missing = self._missing_imports(output) - set(sources) - unreadable
            if not missing or self.read_callback is None:
                break

            resolved = 0
            for path in sorted(missing):
                try:
                    text = self.read_callback(path)
                except SourceStoreError as e:
                    logger.warning("import_unreadable", path=path, error=str(e))
                    unreadable.add(path)
                    continue
                sources[path] = text
                discovered[path] = text
                resolved += 1
                logger.info("import_resolved", path=path)

            if not resolved:
                break
            output = self._run(sources)

        trees, diagnostics = SolcAstReader().read_output(output, sources)
        if not trees or set(sources) - set(trees):
            return ParseFailed(diagnostics=tuple(diagnostics))

        return Compiled(
            diagnostics=tuple(diagnostics),
            session=CompilationSession(trees, sources),
            discovered=discovered,
        )

    # ========== solc ==========

    def standard_input(self, sources: Mapping[str, str]) -> dict[str, Any]:
        """Standard JSON input requesting only the AST."""
        settings: dict[str, Any] = {"outputSelection": {"*": {"": ["ast"]}}}
        if self.evm_version:
            settings["evmVersion"] = self.evm_version
        return {
            "language": "Solidity",
            "sources": {unit_id: {"content": text} for unit_id, text in sorted(sources.items())},
            "settings": settings,
        }

    def command(self) -> list[str]:
        command = [self.binary, "--standard-json"]
        if self.base_path:
            command += ["--base-path", self.base_path]
        if self.allow_paths:
            command += ["--allow-paths", ",".join(self.allow_paths)]
        return command

    def _run(self, sources: Mapping[str, str]) -> dict[str, Any]:
        command = self.command()
        logger.debug("solc_invoked", command=command, units=len(sources))

        try:
            result = subprocess.run(
                command,
                input=json.dumps(self.standard_input(sources)),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise CompilerNotFoundError(
                f"Solidity compiler not found: {self.binary}",
                details={"binary": self.binary},
            ) from e
        except subprocess.TimeoutExpired as e:
            raise FrontEndError(
                f"Solidity compiler timed out after {self.timeout}s",
                details={"binary": self.binary},
            ) from e

        try:
            output = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise FrontEndError(
                "Solidity compiler produced no standard JSON output",
                details={"returncode": result.returncode, "stderr": result.stderr.strip()[:500]},
            ) from e

        if not isinstance(output, dict):
            raise FrontEndError("Unexpected standard JSON output", details={"type": type(output).__name__})
        return output

    @staticmethod
    def _missing_imports(output: Mapping[str, Any]) -> set[str]:
        missing = set()
        for error in output.get("errors") or []:
            match = _MISSING_SOURCE.search(error.get("message", ""))
            if match:
                missing.add(match.group(1))
        return missing
