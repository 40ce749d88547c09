"""Embedding driver for code contexts.

The embedding model itself is opaque: any callable mapping text to a vector,
synchronous or ``async``.  Synchronous callables run in a worker thread so
they never block the event loop.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable

from loguru import logger

from ..config.defaults import DEFAULT_EMBEDDING_CONCURRENCY
from .context_builder import CodeContext, build_contextual_text
from .exceptions import EmbeddingError

EmbedFunction = Callable[[str], list[float] | Awaitable[list[float]]]


class ContextEmbedder:
    """Embeds ``CodeContext`` objects through a caller-supplied function."""

    def __init__(
        self,
        embed_fn: EmbedFunction,
        max_concurrent: int = DEFAULT_EMBEDDING_CONCURRENCY,
        file_path: str | None = None,
        language: str | None = None,
    ) -> None:
        """Initialize the embedder.

        Args:
            embed_fn: Maps one text to one vector; may be a coroutine function
            max_concurrent: Maximum in-flight calls (1 = strictly sequential)
            file_path: Included in the contextual header when given
            language: Included in the contextual header when given
        """
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be at least 1, got {max_concurrent}")
        self.embed_fn = embed_fn
        self.max_concurrent = max_concurrent
        self.file_path = file_path
        self.language = language

    async def _embed_one(self, context: CodeContext) -> list[float]:
        text = build_contextual_text(context, self.file_path, self.language)
        try:
            if inspect.iscoroutinefunction(self.embed_fn):
                vector = await self.embed_fn(text)
            else:
                vector = await asyncio.to_thread(self.embed_fn, text)
                if inspect.isawaitable(vector):
                    vector = await vector
        except Exception as e:
            raise EmbeddingError(
                f"Failed to embed {context.symbol!r}: {e}",
                context={"symbol": context.symbol, "type": context.type},
            ) from e
        return list(vector)

    async def embed_contexts(self, contexts: list[CodeContext]) -> list[list[float]]:
        """Embed every context; results are returned in input order.

        With concurrency enabled, the first failure cancels the calls still in
        flight.

        Raises:
            EmbeddingError: If the embedding function fails for any context
        """
        if not contexts:
            return []

        if self.max_concurrent == 1:
            return [await self._embed_one(context) for context in contexts]

        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def bounded(context: CodeContext) -> list[float]:
            async with semaphore:
                return await self._embed_one(context)

        logger.debug(
            f"Embedding {len(contexts)} contexts with max_concurrent={self.max_concurrent}"
        )
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(bounded(c)) for c in contexts]
        except ExceptionGroup as eg:
            # Remaining calls are cancelled by the group; surface the first failure
            raise eg.exceptions[0]
        return [task.result() for task in tasks]
