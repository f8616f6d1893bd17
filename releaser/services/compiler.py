from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ..core.result import Err, Ok, Result
from ..output.console import ConsoleProtocol
from ..platform.process import run
from .errors import CompilerFailed

__all__ = ["compile_scripts", "compiler_command"]


def compiler_command(compiler: str, output_dir: str, script: Path) -> list[str]:
    """ISCC command line: ``<compiler> /O<output_dir> <script>``."""
    return [compiler, f"/O{output_dir}", script.as_posix()]


def compile_scripts(
    compiler: str,
    output_dir: str,
    scripts: Sequence[Path],
    *,
    console: ConsoleProtocol,
    cwd: Path | None = None,
) -> Result[list[Path], CompilerFailed]:
    """Compile each script in order, stopping at the first failure."""
    compiled: list[Path] = []
    for script in scripts:
        console.info("create setup file", script=script.as_posix())
        result = run(
            compiler_command(compiler, output_dir, script),
            cwd=cwd if cwd is not None else Path.cwd(),
        )
        if isinstance(result, Err):
            return Err(
                CompilerFailed(
                    script=script,
                    returncode=result.error.returncode,
                    output=result.error.output,
                )
            )
        console.info("create setup file ok", script=script.as_posix())
        compiled.append(script)
    return Ok(compiled)
