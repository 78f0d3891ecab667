"""
Token stream tee.

Splits one upstream token stream between two consumers: the caller, which
reads tokens as they arrive, and an accumulator that holds the full text for
caching. A pump task drains the upstream into a shared token list; the caller
follows with its own cursor and is woken through an asyncio.Event. Neither
side waits on the other. The buffer is the response itself, so its size is
bounded by the provider's output limit.

Dependencies: asyncio
System role: Forward-while-accumulating streaming
"""

import asyncio
import logging
from collections.abc import AsyncIterator

from backend.core.exceptions import ProviderError, upstream_status_code

logger = logging.getLogger(__name__)


class StreamTee:
    """Fan one async token stream out to a live reader and an accumulator."""

    def __init__(self, source: AsyncIterator[str]) -> None:
        """
        Args:
            source: Upstream token stream; consumed exactly once
        """
        self._source = source
        self._tokens: list[str] = []
        self._done = False
        self._error: ProviderError | None = None
        self._changed = asyncio.Event()
        self._pump_task: asyncio.Task[None] | None = None

    @property
    def done(self) -> bool:
        """True once the upstream finished, successfully or not."""
        return self._done

    @property
    def text(self) -> str:
        """
        Full accumulated text.

        Raises:
            RuntimeError: When the upstream has not completed successfully
        """
        if not self._done or self._error is not None:
            raise RuntimeError("Stream has not completed successfully")
        return "".join(self._tokens)

    async def stream(self) -> AsyncIterator[str]:
        """
        Yield upstream tokens unchanged, in order, as soon as they arrive.

        Closing this iterator early cancels the upstream pump.

        Raises:
            ProviderError: When the upstream fails
        """
        if self._pump_task is None:
            self._pump_task = asyncio.get_running_loop().create_task(self._pump())

        cursor = 0
        try:
            while True:
                while cursor < len(self._tokens):
                    token = self._tokens[cursor]
                    cursor += 1
                    yield token
                if self._done:
                    if self._error is not None:
                        raise self._error
                    return
                self._changed.clear()
                await self._changed.wait()
        finally:
            if not self._done and self._pump_task is not None:
                logger.info(f"{__name__}:stream - Reader closed early, cancelling upstream")
                self._pump_task.cancel()

    async def _pump(self) -> None:
        try:
            async for token in self._source:
                self._tokens.append(token)
                self._changed.set()
        except asyncio.CancelledError:
            self._error = ProviderError("Generation stream cancelled", operation="generate")
            raise
        except ProviderError as e:
            self._error = e
        except Exception as e:
            logger.error(f"{__name__}:_pump - Upstream failed after {len(self._tokens)} tokens: {type(e).__name__}: {e}")
            self._error = ProviderError(
                f"Generation provider failed: {e}",
                operation="generate",
                details={"tokens_received": len(self._tokens)},
                status_code=upstream_status_code(e),
            )
        finally:
            self._done = True
            self._changed.set()
            aclose = getattr(self._source, "aclose", None)
            if aclose is not None:
                await aclose()
