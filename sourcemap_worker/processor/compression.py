import gzip
import shutil
from pathlib import Path


def gzip_file(source: Path, dest: Path, compresslevel: int = 9) -> None:
    """Stream source into a gzip archive at dest.

    mtime is pinned to 0 so identical input always yields identical bytes.
    """
    with (
        source.open("rb") as fin,
        dest.open("wb") as raw,
        gzip.GzipFile(
            filename=source.name,
            mode="wb",
            fileobj=raw,
            compresslevel=compresslevel,
            mtime=0,
        ) as fout,
    ):
        shutil.copyfileobj(fin, fout)
