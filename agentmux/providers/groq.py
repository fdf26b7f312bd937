from .openai import OpenAIAdapter

GROQ_API_URL = "https://api.groq.com/openai/v1/chat/completions"


class GroqAdapter(OpenAIAdapter):
    """
    Adapter for Groq (OpenAI-compatible). Groq still takes `max_tokens`.
    """

    def __init__(self, api_url: str = GROQ_API_URL):
        super().__init__(
            api_url=api_url,
            provider_name="groq",
            key_field="groq_api_key",
            max_tokens_field="max_tokens",
        )
