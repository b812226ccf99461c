from sourcemap_worker.config.settings import Settings
from sourcemap_worker.minify.base import BaseMinifier
from sourcemap_worker.minify.rjsmin_adapter import RjsminAdapter
from sourcemap_worker.minify.terser_adapter import TerserAdapter


class MinifierFactory:
    """Creates the configured minifier adapter."""

    ENGINES: tuple[str, ...] = ("rjsmin", "terser")

    @classmethod
    def create(cls, settings: Settings) -> BaseMinifier:
        engine = settings.minifier_engine.lower()
        if engine == "rjsmin":
            return RjsminAdapter()
        if engine == "terser":
            return TerserAdapter(binary=settings.terser_binary)
        raise ValueError(
            f"Unknown minifier engine '{engine}'. Choose from: {list(cls.ENGINES)}"
        )
