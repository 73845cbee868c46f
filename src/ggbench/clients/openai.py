import openai

from ggbench.errors import UpstreamUnavailable
from ggbench.util.logging import get_logger

logger = get_logger(__name__)


class OpenAICompatibleClient:
    """
    Chat completion client for any OpenAI compatible endpoint (OpenAI, OpenRouter, vLLM, ...).

    Requests are bounded by ``timeout`` and are not retried by the SDK; callers
    own the retry policy.
    """

    def __init__(self, base_url, api_key, timeout=60.0, default_headers=None):
        self.client = openai.OpenAI(
            base_url=base_url,
            api_key=api_key,
            timeout=timeout,
            max_retries=0,
            default_headers=default_headers or None,
        )

    def send_prompt(self, **kwargs):
        prompt_in_kwargs = "prompt" in kwargs
        messages_in_kwargs = "messages" in kwargs
        assert not (messages_in_kwargs and prompt_in_kwargs)
        assert messages_in_kwargs or prompt_in_kwargs
        assert "model" in kwargs

        if prompt_in_kwargs:
            kwargs["messages"] = [
                {
                    "role": "user",
                    "content": kwargs.pop("prompt"),
                }
            ]

        try:
            response = self.client.chat.completions.create(**kwargs)
        except openai.APIError as error:
            logger.warning(
                "Chat completion failed",
                model=kwargs["model"],
                error=str(error),
            )
            raise UpstreamUnavailable(f"Model endpoint failed: {error}") from error

        if not response.choices:
            return ""

        return response.choices[0].message.content or ""
