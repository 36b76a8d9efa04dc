import logging

import openai
from openai import AsyncOpenAI

from lexiassist.config import Settings
from lexiassist.errors import AIConfigurationError, AIRequestError, AITimeoutError

logger = logging.getLogger(__name__)

WEB_SEARCH_TOOL = {"type": "web_search_preview"}


class AIClient:
    """thin wrapper over the OpenAI SDK: prompt in, free text out.
    every SDK failure leaves here as one of the AIError kinds."""

    def __init__(self, settings: Settings, client: AsyncOpenAI | None = None):
        self.api_key = settings.openai_api_key
        self.model = settings.llm_model
        self.timeout = settings.llm_timeout_seconds
        self.max_retries = settings.llm_max_retries
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if not self.api_key:
            logger.error(
                "OPENAI_API_KEY is not set; add it to backend/.env and restart the server",
            )
            raise AIConfigurationError()
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.api_key, timeout=self.timeout, max_retries=self.max_retries,
            )
        return self._client

    async def complete(self, prompt: str, web_search: bool = False) -> str:
        client = self._get_client()
        logger.info("ai request: model=%s web_search=%s", self.model, web_search)
        try:
            if web_search:
                text = await self._respond_with_search(client, prompt)
            else:
                text = await self._chat(client, prompt)
        except openai.APITimeoutError as e:
            logger.error("ai request timed out after %.0fs", self.timeout)
            raise AITimeoutError(f"AI request timed out after {self.timeout:.0f} seconds") from e
        except openai.APIStatusError as e:
            logger.error("ai request failed: status=%s body=%s", e.status_code, e.body)
            raise AIRequestError(e.message or "AI request failed") from e
        except openai.APIConnectionError as e:
            logger.error("ai service unreachable: %s", e)
            raise AIRequestError(f"AI service unreachable: {e}") from e

        if not text:
            raise AIRequestError("AI returned an empty response")
        return text

    async def _chat(self, client: AsyncOpenAI, prompt: str) -> str | None:
        resp = await client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=0.2,
        )
        return resp.choices[0].message.content

    async def _respond_with_search(self, client: AsyncOpenAI, prompt: str) -> str:
        # web search is only offered through the responses api
        resp = await client.responses.create(
            model=self.model,
            input=prompt,
            tools=[WEB_SEARCH_TOOL],
        )
        return resp.output_text

    async def close(self):
        if self._client is not None:
            await self._client.close()
            self._client = None
