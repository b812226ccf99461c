import re
import subprocess
import tempfile
from pathlib import Path

from sourcemap_worker.logging.logger import Log
from sourcemap_worker.minify.base import BaseMinifier, MinifyResult, generated_file_name
from sourcemap_worker.minify.exceptions import MinificationError


class TerserAdapter(BaseMinifier):
    """Minifies scripts by running the terser CLI in a scratch directory."""

    OUTPUT_NAME = "out.js"
    REFERENCE_COMMENT = re.compile(r"\n?//# sourceMappingURL=\S*\s*\Z")

    def __init__(self, binary: str = "terser") -> None:
        self._binary = binary

    def minify(
        self,
        source: str,
        *,
        source_name: str,
        source_map_url: str,
    ) -> MinifyResult:
        with tempfile.TemporaryDirectory(prefix="sourcemap-worker-") as scratch:
            workdir = Path(scratch)
            input_path = workdir / source_name
            input_path.parent.mkdir(parents=True, exist_ok=True)
            input_path.write_text(source, encoding="utf-8")

            output_path = workdir / self.OUTPUT_NAME
            command = self._build_command(source_name, generated_file_name(source_map_url))
            Log.debug(f"Running {' '.join(command)}")
            try:
                subprocess.run(
                    command,
                    cwd=workdir,
                    check=True,
                    capture_output=True,
                    text=True,
                )
            except FileNotFoundError as exc:
                raise MinificationError(f"terser binary not found: {self._binary}") from exc
            except subprocess.CalledProcessError as exc:
                stderr = (exc.stderr or "").strip()
                raise MinificationError(f"terser failed for {source_name}: {stderr}") from exc

            map_path = output_path.with_name(self.OUTPUT_NAME + ".map")
            try:
                code = output_path.read_text(encoding="utf-8")
                source_map = map_path.read_text(encoding="utf-8")
            except OSError as exc:
                raise MinificationError(f"terser produced no output for {source_name}") from exc
        code = self.REFERENCE_COMMENT.sub("", code).rstrip("\n")
        return MinifyResult(code=code, map=source_map)

    def _build_command(self, source_name: str, generated_name: str) -> list[str]:
        return [
            self._binary,
            source_name,
            "--compress",
            "--mangle",
            "--source-map",
            f"filename='{generated_name}',includeSources",
            "--output",
            self.OUTPUT_NAME,
        ]
