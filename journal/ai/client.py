import os
from functools import lru_cache

from openai import OpenAI


class OpenAINotConfiguredError(RuntimeError):
    """OPENAI_API_KEY is not set."""


@lru_cache
def get_openai_client() -> OpenAI:
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        # Raised per request so the rest of the API still starts without a key
        raise OpenAINotConfiguredError("OPENAI_API_KEY not configured")
    return OpenAI(api_key=api_key)
