import re
from dataclasses import dataclass, field
from pathlib import Path

from sourcemap_worker.processor.models import FileKind, ScriptFile
from sourcemap_worker.processor.paths import AssetLayout

FINGERPRINT = re.compile(r"[0-9a-f]{32}")


@dataclass
class Classification:
    fingerprinted: list[ScriptFile] = field(default_factory=list)
    plain: list[ScriptFile] = field(default_factory=list)


def discover_scripts(layout: AssetLayout) -> list[Path]:
    """All script files under the assets directory, excluding saved originals."""
    return sorted(
        path
        for path in layout.assets_path.rglob(f"*{layout.extension}")
        if path.is_file() and not layout.is_original(path)
    )


def discover_originals(layout: AssetLayout) -> list[Path]:
    return sorted(
        path
        for path in layout.assets_path.rglob(f"*{layout.original_suffix}")
        if path.is_file()
    )


def classify_path(path: Path, assets_path: Path) -> FileKind:
    """Fingerprinted when the path below the assets directory has a 32-char hex run."""
    try:
        candidate = path.relative_to(assets_path).as_posix()
    except ValueError:
        candidate = path.as_posix()
    if FINGERPRINT.search(candidate):
        return FileKind.FINGERPRINTED
    return FileKind.PLAIN


def classify(paths: list[Path], assets_path: Path) -> Classification:
    classification = Classification()
    for path in paths:
        script = ScriptFile(path=path, kind=classify_path(path, assets_path))
        if script.kind is FileKind.FINGERPRINTED:
            classification.fingerprinted.append(script)
        else:
            classification.plain.append(script)
    return classification
