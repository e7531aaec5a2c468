"""
FileSourceStore 통합 테스트 (tmp_path)
"""

import pytest

from codegraph_upgrade.common.exceptions import InvalidInputError, PathNotAllowedError, SourceStoreError
from codegraph_upgrade.infrastructure.source_store import FileSourceStore


@pytest.fixture
def project(tmp_path):
    (tmp_path / "contracts").mkdir()
    (tmp_path / "lib").mkdir()
    (tmp_path / "contracts" / "A.sol").write_text("contract A {}\n", encoding="utf-8")
    (tmp_path / "lib" / "L.sol").write_text("library L {}\n", encoding="utf-8")
    return tmp_path


class TestLoad:
    def test_loads_given_files(self, project):
        path = (project / "contracts" / "A.sol").as_posix()

        sources = FileSourceStore().load([path])

        assert sources == {path: "contract A {}\n"}

    def test_missing_file(self, project):
        missing = (project / "nope.sol").as_posix()

        with pytest.raises(InvalidInputError) as exc_info:
            FileSourceStore().load([missing])

        assert exc_info.value.message == f'"{missing}" is not found.'

    def test_directory_is_not_a_file(self, project):
        directory = (project / "contracts").as_posix()

        with pytest.raises(InvalidInputError, match="is not a valid file"):
            FileSourceStore().load([directory])

    def test_ignore_missing_skips(self, project):
        present = (project / "contracts" / "A.sol").as_posix()
        missing = (project / "nope.sol").as_posix()
        store = FileSourceStore(ignore_missing=True)

        sources = store.load([missing, present])

        assert list(sources) == [present]
        assert store.skipped == [f'"{missing}" is not found. Skipping.']

    def test_nothing_left(self, project):
        with pytest.raises(InvalidInputError, match="No input files given"):
            FileSourceStore(ignore_missing=True).load([(project / "nope.sol").as_posix()])

    def test_no_paths(self):
        with pytest.raises(InvalidInputError, match="No input files given"):
            FileSourceStore().load([])

    def test_line_endings_preserved(self, tmp_path):
        path = tmp_path / "crlf.sol"
        path.write_bytes(b"contract A {\r\n}\r\n")

        sources = FileSourceStore().load([path.as_posix()])

        assert sources[path.as_posix()] == "contract A {\r\n}\r\n"


class TestRead:
    def test_allow_all_by_default(self, project):
        store = FileSourceStore()

        assert store.allow_all
        assert store.read((project / "lib" / "L.sol").as_posix()) == "library L {}\n"

    def test_star_allows_everything(self, project):
        store = FileSourceStore(allowed_directories=["*", (project / "contracts").as_posix()])

        assert store.allow_all
        assert store.read((project / "lib" / "L.sol").as_posix()) == "library L {}\n"

    def test_inside_allowed_directory(self, project):
        store = FileSourceStore(allowed_directories=[(project / "lib").as_posix()])

        assert store.read((project / "lib" / "L.sol").as_posix()) == "library L {}\n"

    def test_outside_allowed_directories(self, project):
        store = FileSourceStore(allowed_directories=[(project / "lib").as_posix()])

        with pytest.raises(PathNotAllowedError, match="outside of allowed directories"):
            store.read((project / "contracts" / "A.sol").as_posix())

    def test_not_found(self, project):
        with pytest.raises(SourceStoreError, match="File not found."):
            FileSourceStore().read((project / "lib" / "Missing.sol").as_posix())

    def test_not_a_file(self, project):
        with pytest.raises(SourceStoreError, match="Not a valid file."):
            FileSourceStore().read((project / "lib").as_posix())


class TestWrite:
    def test_overwrites_unit(self, project):
        path = (project / "contracts" / "A.sol").as_posix()
        store = FileSourceStore()

        store.write(path, "abstract contract A {}\r\n")

        assert (project / "contracts" / "A.sol").read_bytes() == b"abstract contract A {}\r\n"

    def test_write_failure(self, project):
        target = (project / "missing-dir" / "A.sol").as_posix()

        with pytest.raises(SourceStoreError) as exc_info:
            FileSourceStore().write(target, "x")

        assert exc_info.value.message == f"Cannot write to input file {target}"
