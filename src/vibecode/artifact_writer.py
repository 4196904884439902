"""Artifact writer.

Persists fully assembled artifacts under an output directory. This is the
only module that writes generated content; resolution and synthesis never
touch the filesystem.

Security:
- Artifact names must be relative and stay inside the output directory
- Existing files are never overwritten unless explicitly requested
- All targets are validated before the first write
"""

import logging
from pathlib import Path

from vibecode.exceptions import ArtifactWriteError
from vibecode.models.selection_models import Artifact

logger = logging.getLogger(__name__)


def _target_path(output_dir: Path, artifact: Artifact) -> Path:
    relative = Path(artifact.name)
    if relative.is_absolute():
        raise ArtifactWriteError(f"Artifact name must be relative: {artifact.name}")

    target = (output_dir / relative).resolve()
    try:
        target.relative_to(output_dir)
    except ValueError:
        raise ArtifactWriteError(
            f"Artifact '{artifact.name}' would be written outside {output_dir}"
        ) from None
    return target


def plan_artifacts(
    artifacts: list[Artifact], output_dir: Path | str, overwrite: bool = False
) -> list[Path]:
    """Validate artifact targets without writing anything.

    Args:
        artifacts: Artifacts to place
        output_dir: Directory artifacts are relative to
        overwrite: Whether existing files may be replaced

    Returns:
        Target paths, in artifact order

    Raises:
        ArtifactWriteError: If a name escapes the output directory, repeats,
            or targets an existing file while overwrite is False
    """
    output_dir = Path(output_dir).expanduser().resolve()
    targets = []
    for artifact in artifacts:
        target = _target_path(output_dir, artifact)
        if target in targets:
            raise ArtifactWriteError(f"Duplicate artifact name: {artifact.name}")
        if target.exists() and not overwrite:
            raise ArtifactWriteError(
                f"{target} already exists\nUse --force to overwrite generated files."
            )
        if target.is_dir():
            raise ArtifactWriteError(f"{target} is a directory")
        targets.append(target)
    return targets


def write_artifacts(
    artifacts: list[Artifact], output_dir: Path | str, overwrite: bool = False
) -> list[Path]:
    """Write artifacts under ``output_dir``.

    Args:
        artifacts: Fully assembled artifacts
        output_dir: Destination directory (created if missing)
        overwrite: Replace existing files

    Returns:
        Paths written, in artifact order

    Raises:
        ArtifactWriteError: If validation or a write fails
    """
    targets = plan_artifacts(artifacts, output_dir, overwrite=overwrite)

    written = []
    for artifact, target in zip(artifacts, targets, strict=True):
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(artifact.content, encoding="utf-8")
        except OSError as e:
            raise ArtifactWriteError(f"Failed to write {target}: {e}") from e
        logger.info(f"Wrote {artifact.name}")
        written.append(target)
    return written


__all__ = ["plan_artifacts", "write_artifacts"]
