"""Keep the "version" field of JSON manifests in step with the release tag."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Sequence
from pathlib import Path

from reltag.core.result import Err, Ok, Result
from reltag.core.structured import as_str_dict
from reltag.platform.files import atomic_write_text
from reltag.release import tag_prefix
from reltag.release.errors import ReleaseError


def _invalid_manifest(message: str, path: Path) -> ReleaseError:
    return ReleaseError(kind="invalid_manifest", message=message, hint=str(path))


def update_manifest(path: Path, tag: str) -> Result[bool, ReleaseError]:
    """Rewrite the top-level "version" of one manifest.

    Missing files and files without a "version" key are left alone.

    Returns:
        Ok(True) if the file was rewritten, Ok(False) if skipped,
        Err(ReleaseError) if it could not be read, parsed or written.
    """
    if not path.is_file():
        return Ok(False)

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(_invalid_manifest(f"failed to read manifest: {e}", path))

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(_invalid_manifest(f"invalid JSON in manifest: {e}", path))

    data = as_str_dict(obj)
    if data is None or "version" not in data:
        return Ok(False)

    # Manifests never carry the "v" tag prefix.
    data["version"] = tag_prefix.strip(tag)

    try:
        atomic_write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
    except OSError as e:
        return Err(_invalid_manifest(f"failed to write manifest: {e}", path))
    return Ok(True)


async def update_manifests(
    root: Path, files: Sequence[str], tag: str
) -> Result[list[Path], ReleaseError]:
    """Update each manifest under ``root`` in order; stop at the first error."""
    updated: list[Path] = []
    for name in files:
        path = root / name
        result = await asyncio.to_thread(update_manifest, path, tag)
        if isinstance(result, Err):
            return result
        if result.value:
            updated.append(path)
    return Ok(updated)
