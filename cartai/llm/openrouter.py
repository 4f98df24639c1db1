"""
OpenRouter provider implementation.

WHAT: External LLM provider via OpenRouter API
WHY: One API key gives the agents access to many backing models
HOW: OpenAI-compatible API with authorization headers and retry logic
"""

import asyncio
import httpx
import json

from .types import (
    ChatMessage,
    LLMResult,
    ProviderStatus,
    ProviderDisabledError,
    ProviderTimeoutError,
    ProviderUnavailableError,
    ProviderResponseError,
)
from ..core.config import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)


class OpenRouterProvider:
    """OpenRouter LLM provider (disabled unless enabled and keyed)."""

    def __init__(
        self,
        *,
        enabled: bool | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        default_model: str | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
    ):
        """
        Initialize OpenRouter provider.

        Keyword arguments override the corresponding settings values.
        """
        self.enabled = settings.LLM_ENABLE_OPENROUTER if enabled is None else enabled
        self.api_key = settings.OPENROUTER_API_KEY if api_key is None else api_key
        self.base_url = base_url or settings.OPENROUTER_BASE_URL
        self.default_model = default_model or settings.SELLER_MODEL
        self.max_retries = max(1, settings.LLM_MAX_RETRIES if max_retries is None else max_retries)
        self.retry_delay = settings.LLM_RETRY_DELAY if retry_delay is None else retry_delay
        self.client: httpx.AsyncClient | None = None

        if self.enabled:
            if not self.api_key or not self.api_key.strip():
                logger.error("OpenRouter enabled but OPENROUTER_API_KEY is not set or empty!")
                raise ProviderDisabledError(
                    "OpenRouter is enabled but OPENROUTER_API_KEY is not set or empty. "
                    "Set OPENROUTER_API_KEY in your .env file with a key from https://openrouter.ai/keys"
                )

            self.client = httpx.AsyncClient(
                timeout=httpx.Timeout(5.0, read=settings.OPENROUTER_TIMEOUT),
                limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "HTTP-Referer": settings.APP_NAME,
                    "X-Title": settings.APP_NAME,
                },
            )
            logger.info(f"OpenRouter provider initialized (enabled, default model: {self.default_model})")
        else:
            logger.info("OpenRouter provider initialized (disabled)")

    def _check_enabled(self):
        """Raise exception if provider is disabled."""
        if not self.enabled or self.client is None:
            raise ProviderDisabledError("OpenRouter provider is disabled. Set LLM_ENABLE_OPENROUTER=true to enable.")

    async def ping(self) -> ProviderStatus:
        """
        Check OpenRouter availability by fetching models list.

        Returns:
            ProviderStatus with available models

        Raises:
            ProviderDisabledError: If OpenRouter is disabled
        """
        self._check_enabled()

        try:
            response = await self.client.get(f"{self.base_url}/models", timeout=10.0)
            response.raise_for_status()
            data = response.json()

            models = [model.get("id") for model in data.get("data", [])]

            logger.info(f"OpenRouter ping success ({len(models)} models available)")

            return ProviderStatus(
                available=True,
                base_url=self.base_url,
                models=models[:10] if models else None,
                error=None
            )
        except httpx.TimeoutException:
            logger.warning("OpenRouter ping timeout")
            return ProviderStatus(available=False, base_url=self.base_url, error="Request timed out")
        except httpx.ConnectError:
            logger.warning("OpenRouter not reachable")
            return ProviderStatus(available=False, base_url=self.base_url, error="Connection refused")
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"OpenRouter ping failed: {e}")
            return ProviderStatus(available=False, base_url=self.base_url, error=str(e))

    async def generate(
        self,
        messages: list[ChatMessage],
        *,
        temperature: float,
        max_tokens: int,
        stop: list[str] | None = None,
        model: str | None = None
    ) -> LLMResult:
        """
        Generate complete response (non-streaming).

        Args:
            messages: Conversation history
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            stop: Optional stop sequences
            model: Optional model name (uses default_model if not provided)

        Returns:
            LLMResult with text, usage, and model

        Raises:
            ProviderDisabledError: Provider not enabled
            ProviderTimeoutError: Request timed out
            ProviderUnavailableError: OpenRouter not reachable
            ProviderResponseError: Invalid response from OpenRouter
        """
        self._check_enabled()

        model_to_use = model or self.default_model
        logger.debug(f"Using model: {model_to_use} (requested: {model}, default: {self.default_model})")

        payload = {
            "model": model_to_use,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "stream": False
        }

        if stop:
            payload["stop"] = stop

        # Retry logic with exponential backoff
        for attempt in range(self.max_retries):
            last_attempt = attempt == self.max_retries - 1
            try:
                response = await self.client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload
                )
                response.raise_for_status()
                data = response.json()

                text = data["choices"][0]["message"]["content"] or ""
                usage = data.get("usage", {})
                response_model = data.get("model", model_to_use)

                logger.info(f"OpenRouter generate success (model: {response_model}, tokens: {usage.get('total_tokens', 'unknown')})")

                return LLMResult(text=text, usage=usage, model=response_model)

            except httpx.TimeoutException as e:
                logger.warning(f"OpenRouter timeout (attempt {attempt + 1}/{self.max_retries})")
                if last_attempt:
                    raise ProviderTimeoutError(f"Request timed out after {self.max_retries} attempts") from e

            except httpx.ConnectError as e:
                logger.error(f"OpenRouter connection refused (attempt {attempt + 1}/{self.max_retries})")
                if last_attempt:
                    raise ProviderUnavailableError("OpenRouter is not reachable") from e

            except httpx.TransportError as e:
                # Dropped connections, protocol errors and the like
                logger.error(f"OpenRouter transport error {type(e).__name__}: {e} (attempt {attempt + 1}/{self.max_retries})")
                if last_attempt:
                    raise ProviderUnavailableError(f"OpenRouter transport error: {type(e).__name__}") from e

            except httpx.HTTPStatusError as e:
                if e.response.status_code < 500:
                    # Client errors don't retry
                    raise ProviderResponseError(f"HTTP {e.response.status_code}: {e.response.text}") from e
                logger.error(f"OpenRouter server error {e.response.status_code} (attempt {attempt + 1}/{self.max_retries})")
                if last_attempt:
                    raise ProviderResponseError(f"Server error: {e.response.status_code}") from e

            except (KeyError, IndexError, TypeError, json.JSONDecodeError) as e:
                logger.error(f"Invalid response from OpenRouter: {e}")
                raise ProviderResponseError(f"Invalid response format: {e}") from e

            await asyncio.sleep(self.retry_delay * (2 ** attempt))

        raise ProviderResponseError("No attempts were made")

    async def close(self):
        """Close the HTTP client if enabled."""
        if self.client is not None:
            await self.client.aclose()
