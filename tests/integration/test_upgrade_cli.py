"""
CLI 통합 테스트 (typer CliRunner)

실제 파일 + fake front end. solc 없이 종료 코드와 출력 검증.
"""

import pytest
from typer.testing import CliRunner

from codegraph_upgrade import __version__
from codegraph_upgrade.api import UpgradeAPI
from codegraph_upgrade.cli import main as cli_main
from tests.fakes import FakeSolidityFrontEnd, FakeSourceStore

runner = CliRunner()

ABSTRACT_SOURCE = "contract A {\n    function f() public;\n}\n"


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    """fake front end 주입 + 작업 디렉토리 격리"""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli_main, "configure_logging", lambda **kwargs: None)

    def make_api(settings, reporter=None):
        return UpgradeAPI(settings, front_end=FakeSolidityFrontEnd(), reporter=reporter)

    monkeypatch.setattr(cli_main, "UpgradeAPI", make_api)
    return tmp_path


def invoke(*args):
    return runner.invoke(cli_main.app, list(args))


class TestOptions:
    def test_version(self):
        result = invoke("--version")

        assert result.exit_code == 0
        assert f"codegraph-upgrade {__version__}" in result.output

    def test_help_lists_rules(self):
        result = invoke("--help")

        assert result.exit_code == 0
        assert "array-length" in result.output
        assert "--accept-safe" in result.output

    def test_no_files(self):
        result = invoke()

        assert result.exit_code == 1
        assert "No input files given." in result.output

    def test_missing_file(self):
        result = invoke("nope.sol")

        assert result.exit_code == 1
        assert '"nope.sol" is not found.' in result.output

    def test_unknown_rule(self, isolated):
        (isolated / "a.sol").write_text(ABSTRACT_SOURCE, encoding="utf-8")

        result = invoke("--rule", "bogus", "a.sol")

        assert result.exit_code == 1
        assert "Available rules:" in result.output


class TestUpgrade:
    def test_report_only(self, isolated):
        (isolated / "a.sol").write_text(ABSTRACT_SOURCE, encoding="utf-8")

        result = invoke("a.sol")

        assert result.exit_code == 0
        assert "Found 1 upgrade(s)" in result.output
        assert "Upgrade change (safe)" in result.output
        assert (isolated / "a.sol").read_text(encoding="utf-8") == ABSTRACT_SOURCE

    def test_accept_safe_writes(self, isolated):
        (isolated / "a.sol").write_text(ABSTRACT_SOURCE, encoding="utf-8")

        result = invoke("--accept-safe", "a.sol")

        assert result.exit_code == 0
        assert "Writing to input file a.sol..." in result.output
        assert "No errors or upgrades found!" in result.output
        assert (isolated / "a.sol").read_text(encoding="utf-8") == "abstract " + ABSTRACT_SOURCE

    def test_ignore_missing(self, isolated):
        (isolated / "a.sol").write_text(ABSTRACT_SOURCE, encoding="utf-8")

        result = invoke("--ignore-missing", "nope.sol", "a.sol")

        assert result.exit_code == 0
        assert '"nope.sol" is not found. Skipping.' in result.output

    def test_parse_failure_exits_nonzero(self, isolated):
        (isolated / "a.sol").write_text("contract A {\n", encoding="utf-8")

        result = invoke("--accept-safe", "a.sol")

        assert result.exit_code == 1
        assert "cannot resolve occurred" in result.output
        assert (isolated / "a.sol").read_text(encoding="utf-8") == "contract A {\n"


class TestCustomStore:
    def test_store_without_skipped_inputs(self, monkeypatch):
        """포트 기본값: 건너뛴 입력 없음"""
        store = FakeSourceStore({"a.sol": ABSTRACT_SOURCE})

        def make_api(settings, reporter=None):
            return UpgradeAPI(settings, front_end=FakeSolidityFrontEnd(), store=store, reporter=reporter)

        monkeypatch.setattr(cli_main, "UpgradeAPI", make_api)

        result = invoke("--accept-safe", "a.sol")

        assert store.skipped == ()
        assert result.exit_code == 0
        assert "Skipping" not in result.output
        assert store.files["a.sol"] == "abstract " + ABSTRACT_SOURCE
