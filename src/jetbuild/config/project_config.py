"""
jetbuild.ini configuration parser.

This module loads the build configuration of a project from an optional
jetbuild.ini file and applies command-line overrides.

Example jetbuild.ini:
    [jetbuild]
    main_class = com.example.App
    final_name = app-1.0
    zip_output = true
    dependencies =
        libs/lib-1.0.jar
        libs/util-2.3.jar

Relative paths are resolved against the project directory.
"""

import configparser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

CONFIG_FILE = "jetbuild.ini"
SECTION = "jetbuild"

DEFAULT_OUTPUT_DIR = Path("target") / "jet"
DEFAULT_ICON = Path("src") / "main" / "jetresources" / "icon.ico"


class ProjectConfigError(Exception):
    """Exception raised for jetbuild.ini configuration errors."""

    pass


@dataclass
class JetBuildConfig:
    """Build configuration consumed by the orchestrator."""

    project_dir: Path
    main_class: Optional[str]
    main_jar: Path
    final_name: str
    output_dir: Path
    jet_home: Optional[str] = None
    output_name: Optional[str] = None
    icon: Optional[Path] = None
    hide_console: bool = False
    zip_output: bool = True
    dependencies: List[Path] = field(default_factory=list)


class ProjectConfigLoader:
    """
    Loader for jetbuild.ini configuration files.

    Usage:
        loader = ProjectConfigLoader(Path("."))
        config = loader.load(overrides={"main_class": "com.example.App"})
    """

    KNOWN_KEYS = {
        "main_class",
        "main_jar",
        "final_name",
        "jet_home",
        "output_dir",
        "output_name",
        "icon",
        "hide_console",
        "zip_output",
        "dependencies",
    }

    def __init__(self, project_dir: Path):
        """
        Initialize the loader for a project directory.

        Args:
            project_dir: Project root; jetbuild.ini is optional
        """
        self.project_dir = Path(project_dir).resolve()
        self.ini_path = self.project_dir / CONFIG_FILE

    def read_settings(self) -> Dict[str, str]:
        """
        Read raw settings from jetbuild.ini.

        Returns:
            Key-value pairs of the [jetbuild] section (empty if no file)

        Raises:
            ProjectConfigError: If the file cannot be parsed or has unknown keys
        """
        if not self.ini_path.exists():
            return {}

        parser = configparser.ConfigParser(interpolation=None)
        try:
            parser.read(self.ini_path, encoding="utf-8")
        except (configparser.Error, UnicodeDecodeError) as e:
            raise ProjectConfigError(f"Failed to parse {self.ini_path}: {e}") from e

        if not parser.has_section(SECTION):
            raise ProjectConfigError(f"Missing [{SECTION}] section in {self.ini_path}")

        settings = {key: value.strip() for key, value in parser[SECTION].items()}

        unknown = set(settings) - self.KNOWN_KEYS
        if unknown:
            raise ProjectConfigError(
                f"Unknown keys in {self.ini_path}: {', '.join(sorted(unknown))}"
            )

        return settings

    def load(self, overrides: Optional[Dict[str, Any]] = None) -> JetBuildConfig:
        """
        Build the configuration from jetbuild.ini and overrides.

        Args:
            overrides: Values that take precedence over the file (None values are ignored)

        Returns:
            JetBuildConfig with defaults applied and paths resolved

        Raises:
            ProjectConfigError: If a value is invalid
        """
        settings: Dict[str, Any] = dict(self.read_settings())
        for key, value in (overrides or {}).items():
            if value is not None:
                settings[key] = value

        final_name = settings.get("final_name") or self.project_dir.name
        main_jar = settings.get("main_jar") or str(Path("target") / f"{final_name}.jar")

        return JetBuildConfig(
            project_dir=self.project_dir,
            main_class=settings.get("main_class") or None,
            main_jar=self._path(main_jar),
            final_name=final_name,
            output_dir=self._path(settings.get("output_dir") or DEFAULT_OUTPUT_DIR),
            jet_home=settings.get("jet_home") or None,
            output_name=settings.get("output_name") or None,
            icon=self._path(settings.get("icon") or DEFAULT_ICON),
            hide_console=self._bool(settings, "hide_console", False),
            zip_output=self._bool(settings, "zip_output", True),
            dependencies=[self._path(dep) for dep in self._list(settings.get("dependencies"))],
        )

    def _path(self, value: Any) -> Path:
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = self.project_dir / path
        return path

    @staticmethod
    def _bool(settings: Dict[str, Any], key: str, default: bool) -> bool:
        value = settings.get(key)
        if value is None or value == "":
            return default
        if isinstance(value, bool):
            return value
        try:
            return configparser.ConfigParser.BOOLEAN_STATES[str(value).lower()]
        except KeyError:
            raise ProjectConfigError(f"Invalid boolean for {key}: {value!r}")

    @staticmethod
    def _list(value: Any) -> List[str]:
        if not value:
            return []
        if isinstance(value, str):
            return [line.strip() for line in value.splitlines() if line.strip()]
        return [str(item) for item in value]
