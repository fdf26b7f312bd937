"""
Credential loading.

Reads backend credentials from the process environment, after loading a
`.env` file with python-dotenv. Values already set in the environment win
over the file.
"""

import logging
import os
from typing import Optional

import dotenv

from .types import AuthConfig

logger = logging.getLogger(__name__)

# AuthConfig field -> environment variables, first non-empty wins
ENV_VARS = {
    "claude_access_token": ("ANTHROPIC_AUTH_TOKEN",),
    "claude_api_key": ("ANTHROPIC_API_KEY",),
    "openai_api_key": ("OPENAI_API_KEY",),
    "gemini_api_key": ("GOOGLE_API_KEY", "GEMINI_API_KEY"),
    "groq_api_key": ("GROQ_API_KEY",),
}


def _first_env(names) -> Optional[str]:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


def load_auth_config(env_file: Optional[str] = None) -> AuthConfig:
    """
    Build an AuthConfig from the environment.

    Args:
        env_file (str, optional): Path of the .env file. Defaults to searching
            for `.env` from the current directory upwards.

    Returns:
        AuthConfig: Credentials; unset or empty variables become None.
    """
    dotenv.load_dotenv(env_file or dotenv.find_dotenv(usecwd=True))

    values = {field: _first_env(names) for field, names in ENV_VARS.items()}
    configured = [field for field, value in values.items() if value]
    logger.debug("Credentials found for: %s", ", ".join(configured) or "none")
    return AuthConfig(**values)
