"""Shared fixtures for jetbuild tests."""

import os
import stat
from pathlib import Path

import pytest

from jetbuild.config import JetBuildConfig
from jetbuild.packages import PlatformDetector

# Fake compiler: records its arguments and writes an executable named by
# -outputname= into the working directory.
FAKE_JC = r"""#!/bin/sh
printf '%s\n' "$@" > jc.args
echo "jc: compiling $# arguments"
echo "jc: note on stderr" 1>&2
name=""
for arg in "$@"; do
  case "$arg" in
    -outputname=*) name="${arg#-outputname=}" ;;
  esac
done
if [ -n "$name" ]; then
  printf '#!/bin/sh\necho hello\n' > "$name"
  chmod 755 "$name"
fi
exit ${JC_EXIT_CODE:-0}
"""

# Fake packager: copies the -add-file executable into the -target directory.
FAKE_XPACK = r"""#!/bin/sh
printf '%s\n' "$@" > xpack.args
echo "xpack: packaging"
while [ $# -gt 0 ]; do
  case "$1" in
    -add-file) src="$2"; shift 3 ;;
    -target) target="$2"; shift 2 ;;
    *) shift ;;
  esac
done
mkdir -p "$target"
cp -p "$src" "$target/"
exit ${XPACK_EXIT_CODE:-0}
"""


def make_jet_home(root: Path) -> Path:
    """Create a directory with the minimal toolchain layout (bin/jc marker)."""
    bin_dir = root / "bin"
    bin_dir.mkdir(parents=True, exist_ok=True)
    (bin_dir / PlatformDetector.mangle_exe_name("jc")).write_text("")
    return root


def write_script(path: Path, content: str) -> Path:
    path.write_text(content)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def jet_home_factory():
    """Factory creating marker-only toolchain directories."""
    return make_jet_home


@pytest.fixture
def jet_home(tmp_path):
    """Toolchain directory with only the marker executable."""
    return make_jet_home(tmp_path / "jet")


@pytest.fixture
def fake_toolchain(tmp_path):
    """Toolchain directory whose jc/xpack are working shell scripts."""
    if os.name != "posix":
        pytest.skip("fake toolchain scripts require a POSIX shell")
    root = tmp_path / "fakejet"
    bin_dir = root / "bin"
    bin_dir.mkdir(parents=True)
    write_script(bin_dir / "jc", FAKE_JC)
    write_script(bin_dir / "xpack", FAKE_XPACK)
    return root


@pytest.fixture
def project(tmp_path):
    """Project directory with a built main jar and one dependency."""
    project_dir = tmp_path / "project"
    target = project_dir / "target"
    target.mkdir(parents=True)
    (target / "app-1.0.jar").write_bytes(b"PK main jar")
    libs = project_dir / "libs"
    libs.mkdir()
    (libs / "lib-1.0.jar").write_bytes(b"PK dependency")
    return project_dir


@pytest.fixture
def build_config(project):
    """Configuration for the `project` fixture."""
    return JetBuildConfig(
        project_dir=project,
        main_class="com.example.App",
        main_jar=project / "target" / "app-1.0.jar",
        final_name="app-1.0",
        output_dir=project / "target" / "jet",
        dependencies=[project / "libs" / "lib-1.0.jar"],
    )
