"""Inno Setup script generation.

A script is rendered from a ``ScriptModel`` view model in one substitution
pass over a fixed template. Values are inserted as they are: a publisher
name that happens to contain ``$`` or ``{#...}`` is not expanded again.
The one escape applied is for the Pascal string literal in the ``[Code]``
section, where a quote in the redistributable key is doubled.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from string import Template

from ..core.config import AppSpec, ExternEntry, ReleaseConfig
from ..core.result import Err, Ok, Result
from ..output.console import ConsoleProtocol
from ..platform.files import atomic_write_text
from .errors import ScriptWriteFailed
from .stage import VCREDIST_FILE, StagedApp

__all__ = [
    "Define",
    "FileEntry",
    "RuntimeCheck",
    "ScriptModel",
    "build_script_model",
    "render_script",
    "script_path",
    "write_script",
]

_TREE_FLAGS = ("ignoreversion", "recursesubdirs", "createallsubdirs")
_KEEP_EXISTING_FLAGS = ("onlyifdoesntexist", "uninsneveruninstall")
_RUNTIME_CHECK = "NeedInstallVCRuntime"
_UNINSTALL_KEY = r"SOFTWARE\Microsoft\Windows\CurrentVersion\Uninstall"

_SCRIPT_TEMPLATE = Template(
    r"""
; Script generated by the Inno Setup Script Wizard.
; SEE THE DOCUMENTATION FOR DETAILS ON CREATING INNO SETUP SCRIPT FILES!

${defines}

[Setup]
; NOTE: The value of AppId uniquely identifies this application.
; Do not use the same AppId value in installers for other applications.
; (To generate a new GUID, click Tools | Generate GUID inside the IDE.)
AppId=${app_id}
AppName={#AppName}
AppVersion={#AppVersion}
;AppVerName={#AppName} {#AppVersion}
AppPublisher={#AppPublisher}
AppPublisherURL={#AppURL}
AppSupportURL={#AppURL}
AppUpdatesURL={#AppURL}
DefaultDirName=${setup_target}
DefaultGroupName=Atom
OutputBaseFilename={#AppName}_{#AppVersion}
Compression=lzma
SolidCompression=yes
PrivilegesRequired=admin

[Languages]
Name: "english"; MessagesFile: "compiler:Default.isl"

[Tasks]
Name: "desktopicon"; Description: "{cm:CreateDesktopIcon}"; GroupDescription: "{cm:AdditionalIcons}"

[Files]
; Program Files
${program_files}

; Extern Files
${extern_files}

; NOTE: Don't use "Flags: ignoreversion" on any shared system files

; can not replace \ to /
[Icons]
Name: "{group}\{#AppName}"; Filename: "{app}\{#AppExeName}"
Name: "{commondesktop}\{#AppName}"; Filename: "{app}\{#AppExeName}"; Tasks: desktopicon

[Run]
Filename: "{app}\{#AppExeName}"; Description: "{cm:LaunchProgram,{#StringChange(AppName, '&', '&&')}}"; Flags: nowait postinstall skipifsilent
${run}

; copy a vcredist_x64.exe to install path first
[Code]
${code}
"""
)

_RUNTIME_CODE_TEMPLATE = Template(
    """
var NeedVcRuntime: Boolean;

function ${check}(): Boolean;
begin
  Result := NeedVcRuntime;
end;

function InitializeSetup(): Boolean;
var version: Cardinal;
begin
  if RegQueryDWordValue(HKLM, '${registry_path}', 'Version', version) = false then begin
    NeedVcRuntime := true;
  end;
  Result := true;
end;
"""
)


def _pascal_literal(value: str) -> str:
    return value.replace("'", "''")


@dataclass(frozen=True, slots=True)
class Define:
    name: str
    value: str

    def render(self) -> str:
        return f'#define {self.name} "{self.value}"'


@dataclass(frozen=True, slots=True)
class FileEntry:
    """One ``[Files]`` line."""

    source: str
    dest_dir: str
    flags: tuple[str, ...] = _TREE_FLAGS
    excludes: str | None = None

    def render(self) -> str:
        parts = [f'Source: "{self.source}"']
        if self.excludes is not None:
            parts.append(f'Excludes: "{self.excludes}"')
        parts.append(f'DestDir: "{self.dest_dir}"')
        parts.append(f"Flags: {' '.join(self.flags)}")
        return "; ".join(parts)

    @classmethod
    def for_extern(cls, extern: ExternEntry) -> FileEntry:
        flags = _TREE_FLAGS if extern.override else _TREE_FLAGS + _KEEP_EXISTING_FLAGS
        return cls(source=extern.source, dest_dir=extern.target, flags=flags)


@dataclass(frozen=True, slots=True)
class RuntimeCheck:
    """Install the VC++ runtime only when the host lacks it.

    Setup probes the runtime's uninstall registry key at start; the staged
    redistributable is run silently after install if the key is missing.
    """

    registry_key: str

    @property
    def registry_path(self) -> str:
        return f"{_UNINSTALL_KEY}\\{self.registry_key}"

    def render_run(self) -> str:
        return (
            f'Filename: "{{app}}/{VCREDIST_FILE}"; Parameters:/q;WorkingDir:{{tmp}};'
            f'Flags:skipifdoesntexist;StatusMsg:"Installing Runtime...";Check:{_RUNTIME_CHECK}'
        )

    def render_code(self) -> str:
        return _RUNTIME_CODE_TEMPLATE.substitute(
            check=_RUNTIME_CHECK,
            registry_path=_pascal_literal(self.registry_path),
        )


def _no_entries() -> list[FileEntry]:
    return []


@dataclass(frozen=True, slots=True)
class ScriptModel:
    app_name: str
    version: str
    app_id: str
    setup_target: str
    defines: tuple[Define, ...]
    program_files: list[FileEntry] = field(default_factory=_no_entries)
    extern_files: list[FileEntry] = field(default_factory=_no_entries)
    runtime: RuntimeCheck | None = None


def build_script_model(config: ReleaseConfig, staged: StagedApp, version: str) -> ScriptModel:
    """Assemble the view model for one staged application."""
    app: AppSpec = staged.app
    defines = (
        Define("AppName", app.name),
        Define("AppVersion", version),
        Define("AppPublisher", config.publisher),
        Define("AppURL", config.url),
        Define("AppExeName", app.exe_name),
        Define("AppSourceDir", app.work_path),
    )
    program_files = [
        FileEntry(source="{#AppSourceDir}/*", dest_dir="{app}/", excludes="\\config"),
    ]
    runtime = None
    if app.vcredist and staged.vcredist_staged:
        runtime = RuntimeCheck(registry_key=app.vcredist)

    return ScriptModel(
        app_name=app.name,
        version=version,
        app_id=app.app_id,
        setup_target=app.setup_target_path,
        defines=defines,
        program_files=program_files,
        extern_files=[FileEntry.for_extern(e) for e in app.externs],
        runtime=runtime,
    )


def render_script(model: ScriptModel) -> str:
    return _SCRIPT_TEMPLATE.substitute(
        defines="\n".join(d.render() for d in model.defines),
        app_id=model.app_id,
        setup_target=model.setup_target,
        program_files="\n".join(f.render() for f in model.program_files),
        extern_files="\n".join(f.render() for f in model.extern_files),
        run=model.runtime.render_run() if model.runtime else "",
        code=model.runtime.render_code() if model.runtime else "",
    )


def script_path(output_dir: str, app_name: str, version: str) -> Path:
    return Path(output_dir) / f"{app_name}_{version}.iss"


def write_script(
    model: ScriptModel, *, output_dir: str, console: ConsoleProtocol
) -> Result[Path, ScriptWriteFailed]:
    """Render and write ``<output_dir>/<app>_<version>.iss``.

    Returns:
        Ok(path) of the written script, Err(ScriptWriteFailed) otherwise.
    """
    path = script_path(output_dir, model.app_name, model.version)
    console.info("create iss file", path=path.as_posix())
    try:
        atomic_write_text(path, render_script(model))
    except OSError as e:
        return Err(ScriptWriteFailed(path=path, reason=str(e)))
    console.info("create iss file ok", path=path.as_posix())
    return Ok(path)
