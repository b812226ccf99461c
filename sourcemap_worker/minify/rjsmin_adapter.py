import json

import rjsmin

from sourcemap_worker.minify.base import BaseMinifier, MinifyResult, generated_file_name
from sourcemap_worker.minify.exceptions import MinificationError


class RjsminAdapter(BaseMinifier):
    """Minifies scripts with rjsmin.

    rjsmin does not track positions, so the emitted map embeds the original
    source but carries no segment mappings.
    """

    def __init__(self, keep_bang_comments: bool = False) -> None:
        self._keep_bang_comments = keep_bang_comments

    def minify(
        self,
        source: str,
        *,
        source_name: str,
        source_map_url: str,
    ) -> MinifyResult:
        try:
            code = rjsmin.jsmin(source, keep_bang_comments=self._keep_bang_comments)
        except Exception as exc:
            raise MinificationError(f"rjsmin minification failed: {exc}") from exc
        source_map = {
            "version": 3,
            "file": generated_file_name(source_map_url),
            "sources": [source_name],
            "sourcesContent": [source],
            "names": [],
            "mappings": "",
        }
        return MinifyResult(code=code, map=json.dumps(source_map))
