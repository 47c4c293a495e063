"""One-shot and streaming completion over a LangChain chat model."""

import logging
from collections.abc import AsyncIterator, Callable

from langchain_core.language_models.chat_models import BaseChatModel

from resume_rag.errors import CompletionError
from resume_rag.models.query import Completion, StreamChunk, Usage

logger = logging.getLogger(__name__)

DEFAULT_MAX_OUTPUT_TOKENS = 350


def _content_text(content) -> str:
    """Flatten message content, which may be a string or a list of parts."""
    if isinstance(content, str):
        return content
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


class CompletionStream:
    """A finite, non-restartable, cancellable stream of StreamChunk.

    Iteration ends after the terminal (done) element. Calling aclose()
    before that closes the upstream model stream; afterwards iteration
    yields nothing. Closing twice is a no-op.
    """

    def __init__(self, source: AsyncIterator[StreamChunk]):
        self._source = source
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> "CompletionStream":
        return self

    async def __anext__(self) -> StreamChunk:
        if self._closed:
            raise StopAsyncIteration
        try:
            chunk = await self._source.__anext__()
        except StopAsyncIteration:
            await self.aclose()
            raise
        if chunk.done:
            await self.aclose()
        return chunk

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._source.aclose()

    async def __aenter__(self) -> "CompletionStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


class LLMProvider:
    """Wraps a chat model for blocking and streaming completion.

    Args:
        model_factory: builds a chat model for a given max output token
            count. Models are cached per limit; sampling parameters are
            whatever the factory fixes at construction.
    """

    def __init__(self, model_factory: Callable[[int], BaseChatModel]):
        self._model_factory = model_factory
        self._models: dict[int, BaseChatModel] = {}

    def _model(self, max_output_tokens: int) -> BaseChatModel:
        if max_output_tokens not in self._models:
            self._models[max_output_tokens] = self._model_factory(max_output_tokens)
        return self._models[max_output_tokens]

    async def complete_once(
        self,
        prompt: str,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    ) -> Completion:
        """Run a single completion.

        Raises:
            CompletionError: on any upstream failure.
        """
        try:
            response = await self._model(max_output_tokens).ainvoke(prompt)
        except Exception as e:
            logger.error("Completion failed: %s", e)
            raise CompletionError(f"Failed to generate completion: {e}") from e

        usage = getattr(response, "usage_metadata", None) or {}
        return Completion(
            text=_content_text(response.content),
            usage=Usage(
                prompt_tokens=usage.get("input_tokens", 0),
                completion_tokens=usage.get("output_tokens", 0),
                total_tokens=usage.get("total_tokens", 0),
            ),
        )

    def complete_stream(
        self,
        prompt: str,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    ) -> CompletionStream:
        """Open a new upstream stream for prompt.

        A failure once streaming has started is delivered as a terminal
        StreamChunk with ``error`` set, so fragments already consumed stay
        valid. The consumer must iterate to the end or call aclose().
        """
        return CompletionStream(self._stream(prompt, max_output_tokens))

    async def _stream(self, prompt: str, max_output_tokens: int) -> AsyncIterator[StreamChunk]:
        upstream = None
        try:
            upstream = self._model(max_output_tokens).astream(prompt)
            async for message in upstream:
                text = _content_text(message.content)
                if text:
                    yield StreamChunk(text=text)
        except Exception as e:
            logger.error("Streaming completion failed: %s", e)
            yield StreamChunk(
                text="",
                done=True,
                error=f"Failed to generate streaming completion: {e}",
            )
            return
        finally:
            aclose = getattr(upstream, "aclose", None)
            if aclose is not None:
                await aclose()
        yield StreamChunk(text="", done=True)
