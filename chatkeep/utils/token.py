"""
Token estimation for stored messages.
"""
import logging
from functools import lru_cache
from typing import Optional

import tiktoken

from chatkeep.config import settings

logger = logging.getLogger(__name__)

# Map model name prefixes to their encoding types. Claude models have no public
# tiktoken encoding, so a similar tokenizer is used for estimation.
MODEL_TO_ENCODING = {
    "gpt-3.5-turbo": "cl100k_base",
    "gpt-4": "cl100k_base",
    "gpt-4o": "o200k_base",
    "claude": "cl100k_base",
}


def encoding_for_model(model_name: Optional[str] = None) -> str:
    """Resolve the encoding name for ``model_name`` (longest matching prefix wins)."""
    if model_name:
        for prefix in sorted(MODEL_TO_ENCODING, key=len, reverse=True):
            if model_name.startswith(prefix):
                return MODEL_TO_ENCODING[prefix]
    return settings.TOKENIZER_ENCODING


@lru_cache(maxsize=16)
def get_tokenizer(encoding_name: str):
    """Load a tiktoken encoding, or None when it cannot be loaded."""
    if not encoding_name:
        return None
    try:
        return tiktoken.get_encoding(encoding_name)
    except Exception as e:
        logger.warning(f"Tokenizer '{encoding_name}' unavailable, using estimate: {e}")
        return None


def estimate_tokens(text: str, model_name: Optional[str] = None) -> int:
    """
    Estimate the number of tokens in a text.

    Args:
        text: The text to estimate tokens for
        model_name: Optional model name to pick a specific tokenizer

    Returns:
        Number of tokens
    """
    if not text:
        return 0

    encoding_name = encoding_for_model(model_name) if settings.TOKENIZER_ENCODING else ""
    encoder = get_tokenizer(encoding_name)
    if encoder:
        return len(encoder.encode(text))

    # Rough estimate: 1 token ~= 4 chars in English
    return max(1, len(text) // 4)
