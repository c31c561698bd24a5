"""Unit tests for DependencyStager."""

import os
from pathlib import Path

import pytest

from jetbuild.build.dependency_stager import DependencyStager, StagingError


@pytest.fixture
def inputs(tmp_path):
    """Main jar plus three dependencies in a source tree."""
    src = tmp_path / "src"
    src.mkdir()
    main_jar = src / "app.jar"
    main_jar.write_bytes(b"main")
    deps = []
    for name in ("zeta-1.0.jar", "alpha-2.0.jar", "mid-0.1.jar"):
        dep = src / name
        dep.write_bytes(name.encode())
        deps.append(dep)
    build_root = tmp_path / "build"
    build_root.mkdir()
    return build_root, main_jar, deps


class TestDependencyStager:
    """Test cases for DependencyStager."""

    def test_no_dependencies(self, inputs):
        """Test only the main artifact is recorded for an empty dependency set."""
        build_root, main_jar, _ = inputs

        paths = DependencyStager().stage(build_root, main_jar, [])

        assert paths == ["app.jar"]
        assert (build_root / "app.jar").read_bytes() == b"main"
        assert (build_root / "lib").is_dir()

    def test_order_and_relative_paths(self, inputs):
        """Test recorded paths follow presentation order and are build-relative."""
        build_root, main_jar, deps = inputs

        paths = DependencyStager().stage(build_root, main_jar, deps)

        assert paths == ["app.jar", "lib/zeta-1.0.jar", "lib/alpha-2.0.jar", "lib/mid-0.1.jar"]
        assert len(paths) == len(deps) + 1
        assert all(not Path(p).is_absolute() for p in paths)
        for dep in deps:
            assert (build_root / "lib" / dep.name).read_bytes() == dep.read_bytes()

    def test_entries_record_sources(self, inputs):
        """Test DependencyEntry pairs source files with staged paths."""
        build_root, main_jar, deps = inputs
        stager = DependencyStager()

        stager.stage(build_root, main_jar, deps[:1])

        assert [(e.source, e.relative_path) for e in stager.entries] == [
            (main_jar, "app.jar"),
            (deps[0], "lib/zeta-1.0.jar"),
        ]

    def test_second_stage_is_idempotent(self, inputs):
        """Test restaging yields the same list and copies nothing."""
        build_root, main_jar, deps = inputs
        stager = DependencyStager()

        first = stager.stage(build_root, main_jar, deps)
        assert stager.copied_count == 4
        staged = build_root / "lib" / "zeta-1.0.jar"
        os.utime(staged, (1_000_000, 1_000_000))

        second = stager.stage(build_root, main_jar, deps)

        assert second == first
        assert stager.copied_count == 0
        assert staged.stat().st_mtime == 1_000_000

    def test_existing_destination_is_not_overwritten(self, inputs):
        """Test a stale staged file survives restaging."""
        build_root, main_jar, deps = inputs
        (build_root / "lib").mkdir()
        stale = build_root / "lib" / "zeta-1.0.jar"
        stale.write_bytes(b"stale")

        paths = DependencyStager().stage(build_root, main_jar, deps)

        assert "lib/zeta-1.0.jar" in paths
        assert stale.read_bytes() == b"stale"

    def test_non_file_dependency_is_skipped(self, inputs, caplog):
        """Test directories in the dependency set are skipped with a warning."""
        build_root, main_jar, deps = inputs
        classes = build_root.parent / "classes"
        classes.mkdir()

        paths = DependencyStager().stage(build_root, main_jar, [deps[0], classes])

        assert paths == ["app.jar", "lib/zeta-1.0.jar"]
        assert "not a regular file" in caplog.text

    def test_copy_failure(self, inputs):
        """Test a missing main artifact raises StagingError with the cause."""
        build_root, main_jar, _ = inputs
        missing = main_jar.parent / "missing.jar"

        with pytest.raises(StagingError, match="missing.jar") as exc_info:
            DependencyStager().stage(build_root, missing, [])

        assert isinstance(exc_info.value.cause, OSError)
        assert exc_info.value.path == missing
