"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from incrlab._errors import ConfigurationError
from incrlab._params import LabParams, lab_params_from_dict, load_lab_params


class ConfigError(ConfigurationError):
    """Error in the [tool.incrlab] configuration."""


@dataclass(slots=True, frozen=True)
class IncrlabConfig:
    """Configuration loaded from pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).

    Attributes:
        params: Lab parameters, either inline or loaded from the file named by
            ``params``. None when the section does not set them.
        labs: Names of the labs to run when none are given on the command line.
        output: Directory that ``incrlab run`` writes its reports to.
        project_root: Directory containing the pyproject.toml.

    """

    params: LabParams | None = None
    labs: tuple[str, ...] = field(default_factory=tuple)
    output: Path | None = None
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def _resolve(value: str, project_root: Path) -> Path:
    path = Path(value)
    if not path.is_absolute():
        path = project_root / path
    return path


def _parse_params(value: object, project_root: Path) -> LabParams:
    """Parse the params field: a path to a TOML file, or an inline table."""
    if isinstance(value, str):
        return load_lab_params(_resolve(value, project_root))
    if isinstance(value, dict):
        return lab_params_from_dict(value)
    msg = "Invalid [tool.incrlab].params: expected a path or a table"
    raise ConfigError(msg)


def load_config(pyproject_path: Path) -> IncrlabConfig:
    """Load and validate [tool.incrlab] config from pyproject.toml.

    Raises:
        ConfigError: If the configuration is invalid.
        ConfigurationError: If the lab parameters it names are invalid.

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("incrlab", {})
    if not section:
        return IncrlabConfig(project_root=project_root)

    params = _parse_params(section["params"], project_root) if "params" in section else None

    labs: tuple[str, ...] = ()
    if "labs" in section:
        labs_value = section["labs"]
        if not isinstance(labs_value, list) or not all(isinstance(name, str) for name in labs_value):
            msg = "Invalid [tool.incrlab].labs: expected a list of lab names"
            raise ConfigError(msg)
        labs = tuple(labs_value)

    output_path: Path | None = None
    if "output" in section:
        output_value = section["output"]
        if not isinstance(output_value, str):
            msg = "Invalid [tool.incrlab].output: expected string path"
            raise ConfigError(msg)
        output_path = _resolve(output_value, project_root)

    return IncrlabConfig(params=params, labs=labs, output=output_path, project_root=project_root)


def get_config() -> IncrlabConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        IncrlabConfig (may be empty if no pyproject.toml or no [tool.incrlab] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return IncrlabConfig()
    return load_config(pyproject_path)
