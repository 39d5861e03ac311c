"""Grammar engine protocol."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from ghostwrite.core.types import Finding


@runtime_checkable
class GrammarEngine(Protocol):
    """A local checker that reports findings for a piece of text.

    Spans index into the exact text passed to :meth:`lint`.
    """

    name: str

    async def lint(self, text: str) -> Sequence[Finding]: ...
