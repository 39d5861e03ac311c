"""Grammar engine discovery.

Engines are addressed as ``"package.module:factory"``. When the module cannot
be imported, an optional plugin file is loaded by path and its
``create_engine`` factory is used instead. The factory may be a class, a plain
function or a coroutine function.
"""

from __future__ import annotations

import importlib
import importlib.util
import inspect
import logging
from pathlib import Path
from typing import Any

from ghostwrite.constants import DEFAULT_GRAMMAR_MODULE, GRAMMAR_PLUGIN_FACTORY
from ghostwrite.core.exceptions import CapabilityUnavailableError

from .base import GrammarEngine

log = logging.getLogger(__name__)


class GrammarEngineLoader:
    def __init__(
        self,
        module: str = DEFAULT_GRAMMAR_MODULE,
        *,
        plugin_path: str | Path | None = None,
    ):
        self.module = module
        self.plugin_path = Path(plugin_path).expanduser() if plugin_path else None

    async def load(self) -> GrammarEngine:
        """Import, construct and return the engine.

        Raises:
            CapabilityUnavailableError: No source produced a usable engine.
        """
        sources = []
        if self.module:
            sources.append((self.module, self._from_module))
        if self.plugin_path is not None:
            sources.append((str(self.plugin_path), self._from_plugin_file))

        errors: list[str] = []
        for source, resolve in sources:
            try:
                factory = resolve()
                engine = await self._construct(factory)
            except Exception as e:
                log.debug("Grammar engine source %s failed", source, exc_info=True)
                errors.append(f"{source}: {e}")
                continue
            log.info("Grammar engine '%s' loaded from %s", engine.name, source)
            return engine

        raise CapabilityUnavailableError(
            "Grammar engine failed to load: " + ("; ".join(errors) or "no source configured")
        )

    def _from_module(self) -> Any:
        module_name, _, attr = self.module.partition(":")
        module = importlib.import_module(module_name)
        return getattr(module, attr or GRAMMAR_PLUGIN_FACTORY)

    def _from_plugin_file(self) -> Any:
        if self.plugin_path is None or not self.plugin_path.is_file():
            raise FileNotFoundError(f"plugin file not found: {self.plugin_path}")
        spec = importlib.util.spec_from_file_location(
            f"ghostwrite_grammar_plugin_{self.plugin_path.stem}", self.plugin_path
        )
        if spec is None or spec.loader is None:
            raise ImportError(f"cannot load plugin from {self.plugin_path}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return getattr(module, GRAMMAR_PLUGIN_FACTORY)

    @staticmethod
    async def _construct(factory: Any) -> GrammarEngine:
        engine = factory()
        if inspect.isawaitable(engine):
            engine = await engine
        if not callable(getattr(engine, "lint", None)):
            raise TypeError(f"{type(engine).__name__} has no lint() method")
        return engine
