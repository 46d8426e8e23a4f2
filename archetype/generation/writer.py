"""All-or-nothing writer for generated files.

Files are first staged inside a temporary directory in the output
directory, then moved into place one by one.  If any step fails, files
already moved are removed, overwritten files are restored from backup and
directories created by the run are deleted, so a failed run leaves the
output directory as it found it.

Scaffold files are only written when absent; existing ones are reported
as skipped and never touched.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path, PurePosixPath

from pydantic import BaseModel, Field

from archetype.errors import GenerationError
from archetype.generation.files import GeneratedFile

logger = logging.getLogger(__name__)

STAGING_PREFIX = ".archetype-staging-"


class WriteReport(BaseModel):
    written: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)


def _parts(relative: str) -> tuple[str, ...]:
    path = PurePosixPath(relative)
    if not relative or path.is_absolute() or ".." in path.parts:
        raise GenerationError(f"Generated path '{relative}' must stay inside the output directory")
    return path.parts


def _missing_dirs(directory: Path) -> list[Path]:
    """*directory* and its ancestors that do not exist yet, outermost first."""
    missing: list[Path] = []
    current = directory
    while not current.exists() and current.parent != current:
        missing.append(current)
        current = current.parent
    return list(reversed(missing))


def _rollback(
    moved: list[tuple[Path, Path | None]],
    staging: Path | None,
    created_dirs: list[Path],
) -> None:
    for target, backup in reversed(moved):
        target.unlink(missing_ok=True)
        if backup is not None and backup.exists():
            backup.replace(target)
    if staging is not None:
        shutil.rmtree(staging, ignore_errors=True)
    for directory in reversed(created_dirs):
        try:
            directory.rmdir()
        except OSError:
            logger.warning("Could not remove %s while rolling back", directory, exc_info=True)


def apply_files(
    files: list[GeneratedFile],
    output_dir: str | Path,
    *,
    dry_run: bool = False,
) -> WriteReport:
    """Write *files* under *output_dir* as one all-or-nothing set.

    Parameters
    ----------
    files:
        Files produced by a template, in generation order.
    output_dir:
        Directory the relative file paths are resolved against.
    dry_run:
        Only compute what would be written and skipped.

    Returns
    -------
    WriteReport
        Relative paths written and scaffold paths skipped.

    Raises
    ------
    GenerationError
        If a path escapes the output directory or any write fails; in the
        latter case everything from this run has been rolled back.
    """
    output_dir = Path(output_dir)
    report = WriteReport()
    plan: list[tuple[tuple[str, ...], Path, GeneratedFile]] = []
    for file in files:
        parts = _parts(file.path)
        target = output_dir.joinpath(*parts)
        if file.scaffold and target.exists():
            report.skipped.append(file.path)
            continue
        plan.append((parts, target, file))
        report.written.append(file.path)

    if dry_run or not plan:
        return report

    created_dirs = _missing_dirs(output_dir)
    moved: list[tuple[Path, Path | None]] = []
    staging: Path | None = None
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(dir=output_dir, prefix=STAGING_PREFIX))

        for parts, _, file in plan:
            staged = staging.joinpath("files", *parts)
            staged.parent.mkdir(parents=True, exist_ok=True)
            with open(staged, "w", encoding="utf-8", newline="") as fh:
                fh.write(file.content)

        for parts, target, _ in plan:
            created_dirs.extend(_missing_dirs(target.parent))
            target.parent.mkdir(parents=True, exist_ok=True)
            backup = None
            if target.exists():
                backup = staging.joinpath("backup", *parts)
                backup.parent.mkdir(parents=True, exist_ok=True)
                target.replace(backup)
            moved.append((target, backup))
            staging.joinpath("files", *parts).replace(target)
    except OSError as exc:
        _rollback(moved, staging, created_dirs)
        raise GenerationError(f"Writing generated files failed: {exc}") from exc
    except BaseException:
        _rollback(moved, staging, created_dirs)
        raise

    shutil.rmtree(staging, ignore_errors=True)
    logger.info(
        "Wrote %d files to %s (%d scaffold files skipped)",
        len(report.written),
        output_dir,
        len(report.skipped),
    )
    return report
