import posixpath
from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class MinifyResult:
    """Minified code and its Source Map v3 document, both as text."""

    code: str
    map: str


def generated_file_name(source_map_url: str) -> str:
    """Name of the generated script a map URL belongs to: /a/b.js.map -> b.js"""
    name = posixpath.basename(source_map_url)
    return name[: -len(".map")] if name.endswith(".map") else name


class BaseMinifier(ABC):
    """Contract for all minification adapters."""

    @abstractmethod
    def minify(
        self,
        source: str,
        *,
        source_name: str,
        source_map_url: str,
    ) -> MinifyResult:
        """Minify script source and produce a source map for it.

        Args:
            source: Script text to minify.
            source_name: Name recorded in the map's ``sources`` list.
            source_map_url: URL the minified file will reference its map by.
                Adapters must not append the reference comment themselves.

        Returns:
            MinifyResult with the minified code and the map document.

        Raises:
            MinificationError: if the source cannot be minified.
        """
