"""
SolcFrontEnd 테스트 (subprocess mock)

standard JSON 입출력, import 해석, 실패 변환
"""

import json
import subprocess
from unittest.mock import patch

import pytest

from codegraph_upgrade.application.ports import Compiled, ParseFailed
from codegraph_upgrade.common.exceptions import CompilerNotFoundError, FrontEndError, SourceStoreError
from codegraph_upgrade.infrastructure.solc_adapter import SolcFrontEnd

RUN = "codegraph_upgrade.infrastructure.solc_adapter.subprocess.run"


def unit_ast(unit_id: str, text: str, node_id: int) -> dict:
    return {
        "id": node_id,
        "nodeType": "SourceUnit",
        "src": f"0:{len(text.encode('utf-8'))}:0",
        "absolutePath": unit_id,
        "nodes": [],
    }


def completed(output, returncode: int = 0, stderr: str = "") -> subprocess.CompletedProcess:
    stdout = output if isinstance(output, str) else json.dumps(output)
    return subprocess.CompletedProcess(args=["solc"], returncode=returncode, stdout=stdout, stderr=stderr)


def ok_output(sources: dict[str, str], errors=None) -> dict:
    return {
        "sources": {
            unit_id: {"id": index, "ast": unit_ast(unit_id, text, 100 + index)}
            for index, (unit_id, text) in enumerate(sorted(sources.items()))
        },
        "errors": errors or [],
    }


def missing_import(path: str) -> dict:
    return {
        "severity": "error",
        "type": "ParserError",
        "message": f'Source "{path}" not found: File not supplied initially.',
    }


SOURCES = {"a.sol": "contract A {}\n"}


# ============================================================
# Standard JSON
# ============================================================


class TestStandardInput:
    def test_requests_ast_only(self):
        front_end = SolcFrontEnd()

        request = front_end.standard_input({"b.sol": "b", "a.sol": "a"})

        assert request["language"] == "Solidity"
        assert list(request["sources"]) == ["a.sol", "b.sol"]
        assert request["sources"]["a.sol"] == {"content": "a"}
        assert request["settings"] == {"outputSelection": {"*": {"": ["ast"]}}}

    def test_evm_version(self):
        request = SolcFrontEnd(evm_version="istanbul").standard_input(SOURCES)

        assert request["settings"]["evmVersion"] == "istanbul"

    def test_command(self):
        assert SolcFrontEnd().command() == ["solc", "--standard-json"]

        front_end = SolcFrontEnd(binary="/opt/solc", base_path="/src", allow_paths=["/lib", "/vendor"])

        assert front_end.command() == [
            "/opt/solc",
            "--standard-json",
            "--base-path",
            "/src",
            "--allow-paths",
            "/lib,/vendor",
        ]


# ============================================================
# compile
# ============================================================


class TestCompile:
    def test_compiled(self):
        with patch(RUN, return_value=completed(ok_output(SOURCES))) as run:
            result = SolcFrontEnd(timeout=5).compile(SOURCES)

        assert isinstance(result, Compiled)
        assert result.session.unit_ids == ["a.sol"]
        assert result.session.source("a.sol") == SOURCES["a.sol"]
        assert result.discovered == {}

        args, kwargs = run.call_args
        assert args[0] == ["solc", "--standard-json"]
        assert json.loads(kwargs["input"])["sources"] == {"a.sol": {"content": SOURCES["a.sol"]}}
        assert kwargs["timeout"] == 5
        assert kwargs["text"] is True

    def test_diagnostics_are_kept(self):
        warning = {"severity": "warning", "type": "Warning", "message": "unused"}

        with patch(RUN, return_value=completed(ok_output(SOURCES, [warning]))):
            result = SolcFrontEnd().compile(SOURCES)

        assert isinstance(result, Compiled)
        assert [d.message for d in result.diagnostics] == ["Warning: unused"]

    def test_parse_failed_without_trees(self):
        error = {"severity": "error", "type": "ParserError", "message": "Expected ';'"}

        with patch(RUN, return_value=completed({"errors": [error]})):
            result = SolcFrontEnd().compile(SOURCES)

        assert isinstance(result, ParseFailed)
        assert result.diagnostics[0].is_blocking

    def test_parse_failed_when_one_unit_has_no_tree(self):
        sources = {"a.sol": "contract A {}\n", "b.sol": "contract B {\n"}
        output = ok_output({"a.sol": sources["a.sol"]})

        with patch(RUN, return_value=completed(output)):
            result = SolcFrontEnd().compile(sources)

        assert isinstance(result, ParseFailed)


# ============================================================
# Import resolution
# ============================================================


class TestImportResolution:
    def test_missing_import_is_read_and_recompiled(self):
        sources = {"a.sol": 'import "lib.sol";\ncontract A {}\n'}
        library = "contract L {}\n"
        first = ok_output(sources, [missing_import("lib.sol")])
        second = ok_output({**sources, "lib.sol": library})
        reads = []

        def read(path):
            reads.append(path)
            return library

        with patch(RUN, side_effect=[completed(first), completed(second)]) as run:
            result = SolcFrontEnd(read_callback=read).compile(sources)

        assert reads == ["lib.sol"]
        assert run.call_count == 2
        assert json.loads(run.call_args.kwargs["input"])["sources"]["lib.sol"] == {"content": library}
        assert isinstance(result, Compiled)
        assert result.discovered == {"lib.sol": library}
        assert result.session.unit_ids == ["a.sol", "lib.sol"]

    def test_unreadable_import_is_not_retried(self):
        sources = {"a.sol": 'import "lib.sol";\ncontract A {}\n'}
        output = {"errors": [missing_import("lib.sol")]}

        def read(path):
            raise SourceStoreError("File not found.")

        with patch(RUN, return_value=completed(output)) as run:
            result = SolcFrontEnd(read_callback=read).compile(sources)

        assert run.call_count == 1
        assert isinstance(result, ParseFailed)

    def test_without_callback(self):
        sources = {"a.sol": 'import "lib.sol";\ncontract A {}\n'}

        with patch(RUN, return_value=completed({"errors": [missing_import("lib.sol")]})) as run:
            result = SolcFrontEnd().compile(sources)

        assert run.call_count == 1
        assert isinstance(result, ParseFailed)


# ============================================================
# Front end failures
# ============================================================


class TestFailures:
    def test_binary_not_found(self):
        with patch(RUN, side_effect=FileNotFoundError("solc")):
            with pytest.raises(CompilerNotFoundError) as exc_info:
                SolcFrontEnd(binary="solc-0.6").compile(SOURCES)

        assert exc_info.value.details["binary"] == "solc-0.6"

    def test_timeout(self):
        with patch(RUN, side_effect=subprocess.TimeoutExpired(cmd="solc", timeout=1)):
            with pytest.raises(FrontEndError, match="timed out"):
                SolcFrontEnd(timeout=1).compile(SOURCES)

    def test_garbage_output(self):
        with patch(RUN, return_value=completed("Segmentation fault", returncode=139, stderr="core dumped")):
            with pytest.raises(FrontEndError) as exc_info:
                SolcFrontEnd().compile(SOURCES)

        assert exc_info.value.details == {"returncode": 139, "stderr": "core dumped"}

    def test_non_object_output(self):
        with patch(RUN, return_value=completed([1, 2])):
            with pytest.raises(FrontEndError, match="Unexpected"):
                SolcFrontEnd().compile(SOURCES)
