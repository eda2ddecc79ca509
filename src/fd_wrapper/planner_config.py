"""
Planner Configuration

Configuration dataclass for a planning session, loadable from YAML or from
``FD_WRAPPER_*`` environment variables (a ``.env`` file is honoured).
"""

import os
import signal
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import yaml
from dotenv import load_dotenv

PathLike = Union[str, Path]

ENV_PREFIX = "FD_WRAPPER_"
DEFAULT_SEARCH_STRATEGY = "astar(lmcut())"


def parse_signal(value: Union[int, str]) -> int:
    """Accept 9, "9", "KILL" or "SIGKILL"."""
    if isinstance(value, int):
        return int(signal.Signals(value))
    text = str(value).strip().upper()
    if text.isdigit():
        return int(signal.Signals(int(text)))
    if not text.startswith("SIG"):
        text = "SIG" + text
    try:
        return int(signal.Signals[text])
    except KeyError:
        raise ValueError(f"Unknown signal: {value}") from None


def _absolute_path(value: Any) -> Path:
    # The planner runs inside planner_dir, so paths handed to it are anchored
    # to the caller's working directory here
    return Path(os.path.abspath(value))


def _optional_path(value: Any) -> Optional[Path]:
    if value is None or value == "":
        return None
    return _absolute_path(value)


_PARSERS: Dict[str, Callable[[Any], Any]] = {
    "planner_dir": _absolute_path,
    "launcher_script": str,
    "python_executable": str,
    "search_strategy": str,
    "timeout": float,
    "kill_signal": parse_signal,
    "result_file": str,
    "problem_dir": _optional_path,
    "planner_log_file": _optional_path,
}


@dataclass
class PlannerConfig:
    """Configuration for a Fast Downward planning session."""
    # Planner installation
    planner_dir: Path
    launcher_script: str = "fast-downward.py"
    python_executable: str = "/usr/bin/python"

    # Search
    search_strategy: str = DEFAULT_SEARCH_STRATEGY  # Passed after --search
    timeout: float = 10.0  # Seconds before the planner is terminated
    kill_signal: int = signal.SIGKILL

    # Files
    result_file: str = "sas_plan_em"  # Answer file written in planner_dir
    problem_dir: Optional[Path] = None  # Generated domain/problem files; defaults to planner_dir
    planner_log_file: Optional[Path] = None  # Planner stdout/stderr; inherited when None

    # Extra values set through set_property that have no dedicated field
    extra: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        for name, parser in _PARSERS.items():
            value = getattr(self, name)
            if value is not None:
                setattr(self, name, parser(value))

    @property
    def launcher_path(self) -> Path:
        return self.planner_dir / self.launcher_script

    @property
    def result_path(self) -> Path:
        return self.planner_dir / self.result_file

    @property
    def effective_problem_dir(self) -> Path:
        return self.problem_dir if self.problem_dir is not None else self.planner_dir

    def planner_arguments(self, problem_file: PathLike) -> list:
        """Arguments passed to the interpreter to plan for ``problem_file``."""
        return [
            str(self.launcher_path),
            str(_absolute_path(problem_file)),
            "--search-options",
            "--search",
            self.search_strategy,
        ]

    # =====================================================================
    # Named property access
    # =====================================================================

    def get_property(self, name: str) -> str:
        """Return a setting as text; unknown names give an empty string."""
        if name in _PARSERS:
            value = getattr(self, name)
            if value is None:
                return ""
            if name == "kill_signal":
                return signal.Signals(value).name
            return str(value)
        return self.extra.get(name, "")

    def set_property(self, name: str, value: Any) -> bool:
        """
        Set a setting from text.

        Returns:
            False if the value cannot be converted to the setting's type
        """
        if name not in _PARSERS:
            self.extra[name] = str(value)
            return True
        try:
            setattr(self, name, _PARSERS[name](value))
        except (TypeError, ValueError):
            return False
        return True

    def copy(self, **overrides: Any) -> "PlannerConfig":
        config = replace(self, extra=dict(self.extra))
        for name, value in overrides.items():
            if value is not None and not config.set_property(name, value):
                raise ValueError(f"Invalid value for {name}: {value!r}")
        return config

    # =====================================================================
    # Loaders
    # =====================================================================

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlannerConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown planner settings: {', '.join(unknown)}")
        if "planner_dir" not in data:
            raise ValueError("planner_dir is required")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: PathLike) -> "PlannerConfig":
        """
        Load configuration from a YAML file.

        Settings may sit at the top level or under a ``planner:`` key.
        Relative ``planner_dir`` / ``problem_dir`` values are resolved against
        the YAML file's directory.
        """
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if "planner" in data and isinstance(data["planner"], dict):
            data = data["planner"]

        for key in ("planner_dir", "problem_dir", "planner_log_file"):
            value = data.get(key)
            if value and not Path(value).is_absolute():
                data[key] = path.parent / value
        return cls.from_dict(data)

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None, dotenv_path: Optional[PathLike] = None) -> "PlannerConfig":
        """
        Load configuration from ``FD_WRAPPER_<SETTING>`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``
            dotenv_path: Optional .env file loaded into the process environment first
        """
        if environ is None:
            load_dotenv(dotenv_path)
            environ = dict(os.environ)

        data = {}
        for name in _PARSERS:
            key = ENV_PREFIX + name.upper()
            if key in environ:
                data[name] = environ[key]
        return cls.from_dict(data)
