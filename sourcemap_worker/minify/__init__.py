from sourcemap_worker.minify.base import BaseMinifier, MinifyResult
from sourcemap_worker.minify.exceptions import MinificationError
from sourcemap_worker.minify.factory import MinifierFactory

__all__ = ["BaseMinifier", "MinificationError", "MinifierFactory", "MinifyResult"]
