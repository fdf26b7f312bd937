from .base import BaseAdapter
from .openai import OpenAIAdapter
from .anthropic import AnthropicAdapter
from .gemini import GeminiAdapter
from .groq import GroqAdapter

__all__ = ["BaseAdapter", "OpenAIAdapter", "AnthropicAdapter", "GeminiAdapter", "GroqAdapter"]
