import hashlib
from pathlib import Path

from sourcemap_worker.processor.exceptions import IndexBuildError


def content_digest(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()


class ContentIndex:
    """Maps a SHA-256 digest of file content to the original file it came from."""

    def __init__(self) -> None:
        self._paths: dict[str, Path] = {}

    def __len__(self) -> int:
        return len(self._paths)

    def add(self, content: bytes, path: Path) -> None:
        """Register content; the first path registered for a digest wins."""
        self._paths.setdefault(content_digest(content), path)

    def lookup(self, content: bytes) -> Path | None:
        return self._paths.get(content_digest(content))

    @classmethod
    def build(cls, originals: list[Path]) -> "ContentIndex":
        """Read every original and index it by content.

        Raises:
            IndexBuildError: if any original cannot be read.
        """
        index = cls()
        for path in originals:
            try:
                content = path.read_bytes()
            except OSError as exc:
                raise IndexBuildError(f"Could not read original {path}: {exc}") from exc
            index.add(content, path)
        return index
