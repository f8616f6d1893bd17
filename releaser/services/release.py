"""Release pipeline.

For each configured application, in order: stage the build output, resolve
the version, write the installer script. Once every script exists, the
installer compiler is run on each of them. Nothing runs concurrently. The
first fatal error ends the run and is handed back to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..core.config import AppSpec, ReleaseConfig, load_config
from ..core.ignore import DEFAULT_IGNORE_FILE, IgnoreList, load_ignore_list
from ..core.result import Err, Ok, Result
from ..core.version import VERSION_MARKER_FILE, ResolvedVersion, resolve_version
from ..output.console import ConsoleProtocol
from .compiler import compile_scripts
from .errors import ReleaseError, StageWarning
from .script import build_script_model, write_script
from .stage import StagedApp, stage_app

__all__ = ["ReleaseReport", "ReleaseService"]


@dataclass(frozen=True, slots=True)
class AppRelease:
    staged: StagedApp
    version: ResolvedVersion
    script: Path


def _no_apps() -> list[AppRelease]:
    return []


@dataclass(slots=True)
class ReleaseReport:
    apps: list[AppRelease] = field(default_factory=_no_apps)
    compiled: list[Path] = field(default_factory=list)

    @property
    def scripts(self) -> list[Path]:
        return [a.script for a in self.apps]

    @property
    def warnings(self) -> list[StageWarning]:
        out: list[StageWarning] = []
        for a in self.apps:
            out.extend(a.staged.warnings)
            if a.version.source == "unreadable":
                out.append(StageWarning(a.staged.app.name, "version file unreadable"))
            if a.version.marker_error is not None:
                out.append(
                    StageWarning(
                        a.staged.app.name,
                        f"create version file failed: {a.version.marker_error}",
                        a.staged.work_path / VERSION_MARKER_FILE,
                    )
                )
        return out


class ReleaseService:
    """Runs the staging → script → compile pipeline.

    Args:
        console: Output capability for progress and warnings.
        cwd: Directory holding ``ignore.txt`` and the runtime installer; also
            the base for relative configuration paths.
        run_compiler: Run the installer compiler after generating scripts.
    """

    def __init__(
        self,
        *,
        console: ConsoleProtocol,
        cwd: Path | None = None,
        run_compiler: bool = True,
    ) -> None:
        self._console = console
        self._cwd = cwd if cwd is not None else Path.cwd()
        self._run_compiler = run_compiler

    def load(self, config_path: Path) -> Result[tuple[ReleaseConfig, IgnoreList], ReleaseError]:
        """Load the configuration and the ignore list."""
        config = load_config(config_path, console=self._console, cwd=self._cwd)
        if isinstance(config, Err):
            return config

        ignore_path = self._cwd / DEFAULT_IGNORE_FILE
        self._console.info("load ignore list", path=ignore_path)
        ignore = load_ignore_list(ignore_path)
        if isinstance(ignore, Err):
            return ignore
        self._console.info("load ignore list ok", patterns=", ".join(ignore.value.patterns))

        return Ok((config.value, ignore.value))

    def release_app(
        self, config: ReleaseConfig, app: AppSpec, ignore: IgnoreList
    ) -> Result[AppRelease, ReleaseError]:
        self._console.header(app.name)

        staged = stage_app(app, ignore, console=self._console, cwd=self._cwd)
        if isinstance(staged, Err):
            return staged

        version = resolve_version(
            config.version,
            work_path=staged.value.work_path,
            console=self._console,
            cwd=self._cwd,
        )

        model = build_script_model(config, staged.value, version.value)
        script = write_script(model, output_dir=config.output_dir, console=self._console)
        if isinstance(script, Err):
            return script

        return Ok(AppRelease(staged=staged.value, version=version, script=script.value))

    def release(
        self, config: ReleaseConfig, ignore: IgnoreList
    ) -> Result[ReleaseReport, ReleaseError]:
        report = ReleaseReport()
        for app in config.apps:
            result = self.release_app(config, app, ignore)
            if isinstance(result, Err):
                return result
            report.apps.append(result.value)

        if self._run_compiler and report.scripts:
            self._console.header("compile")
            compiled = compile_scripts(
                config.compiler,
                config.output_dir,
                report.scripts,
                console=self._console,
                cwd=self._cwd,
            )
            if isinstance(compiled, Err):
                return compiled
            report.compiled.extend(compiled.value)

        return Ok(report)

    def run(self, config_path: Path) -> Result[ReleaseReport, ReleaseError]:
        loaded = self.load(config_path)
        if isinstance(loaded, Err):
            return loaded
        config, ignore = loaded.value
        return self.release(config, ignore)
