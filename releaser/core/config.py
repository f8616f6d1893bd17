"""Release configuration loading and path resolution.

The configuration is a JSON document (``config.json`` by default):

    {
      "version": "version.h",
      "compiler": "C:/Program Files (x86)/Inno Setup 6/ISCC.exe",
      "output": "dist",
      "publisher": "Example Corp",
      "url": "https://example.com",
      "apps": [
        {
          "app_id": "{{6F3C...}}",
          "app_name": "Viewer",
          "app_exe": "viewer.exe",
          "build_path": "build/viewer",
          "setup_target_path": "C:/Program Files/Viewer",
          "vcredist": "{8B3A...}",
          "extern_path": [{"source": "shared/data", "target": "{app}/data", "override": false}]
        }
      ]
    }

Loading resolves every path once: relative build and extern sources become
absolute against the working directory, separators are normalized to
forward slashes, and each application's work directory is derived from the
output directory. The resulting objects are frozen and passed explicitly to
every pipeline step.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path, PureWindowsPath
from typing import TYPE_CHECKING

from .result import Err, Ok, Result
from .structured import (
    FieldTypeError,
    StrDict,
    as_str_dict,
    get_bool,
    get_str,
    get_table_list,
)

if TYPE_CHECKING:
    from releaser.output.console import ConsoleProtocol

__all__ = [
    "AppSpec",
    "ConfigError",
    "DEFAULT_CONFIG_FILE",
    "ExternEntry",
    "ReleaseConfig",
    "is_absolute_target",
    "load_config",
    "to_slash",
]

DEFAULT_CONFIG_FILE = "config.json"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Configuration cannot be loaded or violates a path contract."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ExternEntry:
    """A file or directory from outside the build output bundled with an app.

    ``override=False`` means the installer must not replace an existing copy
    on the target machine and must never remove it on uninstall.
    """

    source: str
    target: str
    override: bool = False


@dataclass(frozen=True, slots=True)
class AppSpec:
    app_id: str
    name: str
    exe_name: str
    build_path: str
    setup_target_path: str
    work_path: str
    vcredist: str | None = None
    externs: tuple[ExternEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    version: str
    compiler: str
    output_dir: str
    publisher: str = ""
    url: str = ""
    apps: tuple[AppSpec, ...] = field(default_factory=tuple)


def to_slash(path: str) -> str:
    """Replace the platform separator with ``/``."""
    if os.sep == "/":
        return path
    return path.replace(os.sep, "/")


def _absolutize(path: str, cwd: Path) -> str:
    if os.path.isabs(path):
        return to_slash(path)
    return to_slash(os.path.normpath(os.path.join(cwd, path)))


def is_absolute_target(path: str) -> bool:
    """Check an install target path.

    Targets are interpreted on the installing Windows host, so drive and UNC
    forms count as absolute regardless of where the release is built.
    """
    if not path:
        return False
    return os.path.isabs(path) or PureWindowsPath(path).is_absolute()


def _parse_extern(data: StrDict, cwd: Path) -> ExternEntry:
    return ExternEntry(
        source=_absolutize(get_str(data, "source"), cwd),
        target=get_str(data, "target"),
        override=get_bool(data, "override"),
    )


def _parse_app(
    data: StrDict, *, output_dir: str, cwd: Path, path: Path, console: ConsoleProtocol
) -> Result[AppSpec, ConfigError]:
    name = get_str(data, "app_name")
    if not name.strip():
        return Err(ConfigError("app_name is required for every app", path=path))

    build_path = _absolutize(get_str(data, "build_path"), cwd)
    console.info("resolve build path", app=name, build_path=build_path)

    work_path = to_slash(f"{output_dir}/{name}")
    console.info("resolve work path", app=name, work_path=work_path)

    setup_target = get_str(data, "setup_target_path")
    if not is_absolute_target(setup_target):
        return Err(
            ConfigError(
                f"Invalid setup_target_path for {name}: {setup_target!r} (must be absolute)",
                path=path,
            )
        )

    externs = tuple(_parse_extern(e, cwd) for e in get_table_list(data, "extern_path"))
    vcredist = get_str(data, "vcredist") or None

    return Ok(
        AppSpec(
            app_id=get_str(data, "app_id"),
            name=name,
            exe_name=get_str(data, "app_exe"),
            build_path=build_path,
            setup_target_path=setup_target,
            work_path=work_path,
            vcredist=vcredist,
            externs=externs,
        )
    )


def _read_json(path: Path) -> Result[StrDict, ConfigError]:
    try:
        text = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    try:
        data_obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(ConfigError(f"Invalid JSON syntax: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a JSON object", path=path))
    return Ok(data)


def load_config(
    path: Path, *, console: ConsoleProtocol, cwd: Path | None = None
) -> Result[ReleaseConfig, ConfigError]:
    """Load the release configuration and resolve every path in it.

    Args:
        path: Path to the JSON configuration document.
        console: Receives diagnostic lines for each resolution step.
        cwd: Base for relative paths (defaults to the process working directory).

    Returns:
        Ok(ReleaseConfig) on success, Err(ConfigError) on the first problem.
    """
    base = cwd if cwd is not None else Path.cwd()
    if not path.is_absolute():
        path = base / path

    console.info("load config", path=path)
    raw = _read_json(path)
    if isinstance(raw, Err):
        return raw
    data = raw.value

    try:
        output = get_str(data, "output")
        compiler = get_str(data, "compiler")
        if not output.strip():
            return Err(ConfigError("output is required", path=path))
        if not compiler.strip():
            return Err(ConfigError("compiler is required", path=path))
        output_dir = _absolutize(output, base)

        apps: list[AppSpec] = []
        for app_data in get_table_list(data, "apps"):
            app = _parse_app(app_data, output_dir=output_dir, cwd=base, path=path, console=console)
            if isinstance(app, Err):
                return app
            apps.append(app.value)

        config = ReleaseConfig(
            version=get_str(data, "version"),
            compiler=compiler,
            output_dir=output_dir,
            publisher=get_str(data, "publisher"),
            url=get_str(data, "url"),
            apps=tuple(apps),
        )
    except FieldTypeError as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))

    console.info("load config ok", path=path, apps=len(config.apps))
    return Ok(config)
