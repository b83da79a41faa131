"""Agno-backed upstream streaming for the chat relay.

Architecture Decisions:

1. **Agent per request** - The system prompt and model differ per request,
   so each call builds a lightweight Agent around a fresh OpenAIChat model.
   The service itself (config, credential) is a process-wide singleton.

2. **No storage** - Conversations are owned by the client and never
   persisted, so the Agent is created without a db or knowledge base.

3. **Content events only** - Agno yields run events with metadata. We
   forward just the text of content events, so the relay sees a plain
   ordered sequence of increments.

4. **Errors raised, not yielded** - Provider failures surface as
   UpstreamError so the HTTP layer can decide between a clean 502 (nothing
   sent yet) and an error terminator (stream already started). Error text
   is never mixed into the relayed content.
"""

import logging
from collections.abc import AsyncGenerator

from agno.agent import Agent
from agno.models.openai import OpenAIChat

from streamchat.models.schemas import STREAM_TERMINATOR, ChatRequest
from streamchat.relay.config import RelayConfig, get_relay_config, resolve_model

logger = logging.getLogger(__name__)

_CONTENT_EVENT = "RunContent"
_ERROR_EVENT = "RunError"


class UpstreamError(Exception):
    """Raised when the upstream streamed call fails to open or continue."""

    pass


class UpstreamService:
    """Service for streaming completions from the model provider.

    Wraps Agno's Agent with:
    - Server-held credential from RelayConfig
    - Default-model substitution for unknown identifiers
    - A plain text-increment interface for the relay endpoint
    - Uniform UpstreamError reporting
    """

    def __init__(self, config: RelayConfig | None = None) -> None:
        """Initialize the upstream service.

        Args:
            config: Optional relay configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_relay_config()

    @property
    def default_model(self) -> str:
        return self._config.model_name

    def _create_agent(self, model_id: str, system_prompt: str) -> Agent:
        """Create the Agno agent for one request.

        Args:
            model_id: Supported model identifier.
            system_prompt: Developer message for the run.

        Returns:
            Agent wired to an OpenAIChat model with the server-held key.
        """
        model = OpenAIChat(
            id=model_id,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )

        return Agent(
            model=model,
            system_message=system_prompt,
            markdown=False,
        )

    async def stream_completion(self, request: ChatRequest) -> AsyncGenerator[str]:
        """Stream text increments for a chat request.

        Args:
            request: Validated chat request.

        Yields:
            Response text increments in the order the provider produces them.

        Raises:
            UpstreamError: If the call fails before or during streaming.
        """
        response_stream = None
        try:
            model_id = resolve_model(request.model, self.default_model)
            agent = self._create_agent(model_id, request.system_prompt)
            response_stream = agent.arun(request.user_message, stream=True)

            async for chunk in response_stream:
                event = getattr(chunk, "event", _CONTENT_EVENT)
                if event == _ERROR_EVENT:
                    raise UpstreamError(str(getattr(chunk, "content", None) or "run failed"))
                if event != _CONTENT_EVENT:
                    continue
                content = getattr(chunk, "content", None)
                if not isinstance(content, str) or not content:
                    continue
                if STREAM_TERMINATOR in content:
                    logger.warning("Dropping NUL characters from upstream content")
                    content = content.replace(STREAM_TERMINATOR, "")
                    if not content:
                        continue
                yield content

        except UpstreamError:
            raise
        except Exception as e:
            raise UpstreamError(f"{type(e).__name__}: {e}") from e
        finally:
            aclose = getattr(response_stream, "aclose", None)
            if aclose is not None:
                await aclose()


# Module-level singleton instance
_upstream_service: UpstreamService | None = None


def get_upstream_service() -> UpstreamService:
    """Get or create the global upstream service.

    Returns:
        The UpstreamService instance.

    Raises:
        ValueError: If the relay has no API key configured.
    """
    global _upstream_service
    if _upstream_service is None:
        _upstream_service = UpstreamService()
    return _upstream_service
