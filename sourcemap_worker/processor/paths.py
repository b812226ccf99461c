import re
from dataclasses import dataclass
from pathlib import Path

from sourcemap_worker.config.settings import Settings
from sourcemap_worker.processor.models import ProcessingRecord


@dataclass(frozen=True)
class AssetLayout:
    """Naming rules for the asset tree under one root directory."""

    root: Path
    public_dir: str = "public"
    assets_dir: str = "assets"
    extension: str = ".js"
    original_marker: str = ".orig"

    @classmethod
    def from_settings(cls, root: Path, settings: Settings) -> "AssetLayout":
        return cls(
            root=root,
            public_dir=settings.public_dir.strip("/"),
            assets_dir=settings.assets_dir.strip("/"),
            extension=settings.script_extension,
            original_marker=settings.original_marker,
        )

    @property
    def assets_path(self) -> Path:
        return self.root / self.public_dir / self.assets_dir

    @property
    def original_suffix(self) -> str:
        return f"{self.original_marker}{self.extension}"

    @property
    def stripped_prefix(self) -> str:
        return f"{self.public_dir}/{self.assets_dir}/"

    @property
    def rooted_prefix(self) -> str:
        return f"/{self.assets_dir}/"

    def is_original(self, path: Path) -> bool:
        return path.name.endswith(self.original_suffix)

    def original_path(self, path: Path) -> Path:
        """app.js -> app.orig.js"""
        return path.with_name(self._stem(path) + self.original_suffix)

    def live_path_for_original(self, original: Path) -> Path:
        """app.orig.js -> app.js"""
        stem = original.name[: -len(self.original_suffix)]
        return original.with_name(stem + self.extension)

    def source_map_path(self, path: Path) -> Path:
        return path.with_name(path.name + ".map")

    def gzip_path(self, path: Path) -> Path:
        return path.with_name(path.name + ".gz")

    def record_for(self, path: Path) -> ProcessingRecord:
        return ProcessingRecord(
            path=path,
            original=self.original_path(path),
            source_map=self.source_map_path(path),
            gzipped=self.gzip_path(path),
        )

    def source_name(self, path: Path) -> str:
        """Root-relative POSIX name, as recorded in a map's sources list."""
        return self._relative(path)

    def source_map_url(self, map_path: Path) -> str:
        """public/assets/app.js.map -> /assets/app.js.map"""
        relative = self._relative(map_path)
        stripped = re.sub(rf"^((\./)?{re.escape(self.public_dir)}/)?", "", relative)
        return "/" + stripped

    def source_map_comment(self, path: Path) -> str:
        return "\n//# sourceMappingURL=" + self.source_map_url(self.source_map_path(path))

    def rewrite_prefix(self, text: str) -> str:
        """Replace ./public/assets/ style prefixes with /assets/."""
        pattern = rf"\.?/?{re.escape(self.stripped_prefix)}"
        return re.sub(pattern, lambda _match: self.rooted_prefix, text)

    def _stem(self, path: Path) -> str:
        name = path.name
        if name.endswith(self.extension):
            return name[: -len(self.extension)]
        return name

    def _relative(self, path: Path) -> str:
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()
