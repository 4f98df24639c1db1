"""
Text processing utilities.

WHAT: Helper functions for cleaning agent output
WHY: Models wrap dialogue in reasoning tags, quotes and stray whitespace
HOW: Regex-based text processing utilities
"""

import re

MAX_MESSAGE_CHARS = 600


def clean_agent_text(text: str | None, *, max_chars: int = MAX_MESSAGE_CHARS) -> str:
    """
    Reduce raw model output to the line of dialogue an agent actually says.

    Args:
        text: Raw LLM output text
        max_chars: Hard length limit

    Returns:
        Cleaned text (empty string if nothing usable remains)
    """
    if not text:
        return ""

    # Keep only what follows the last closing reasoning tag
    parts = re.split(r'</think>', text, flags=re.IGNORECASE)
    text = parts[-1]
    text = re.sub(r'<(think|reasoning)>.*?</\1>', '', text, flags=re.IGNORECASE | re.DOTALL)
    text = re.sub(r'</?(think|reasoning)>', '', text, flags=re.IGNORECASE)

    # Drop a leading speaker label such as "Seller:" or "Response:"
    text = re.sub(r'^\s*(buyer|seller|response|your response)\s*:\s*', '', text, flags=re.IGNORECASE)

    text = re.sub(r'\s+', ' ', text).strip()

    # Models like to quote the whole reply
    if len(text) >= 2 and text[0] == text[-1] and text[0] in '"\'':
        text = text[1:-1].strip()

    if len(text) > max_chars:
        text = text[:max_chars - 3].rsplit(' ', 1)[0] + "..."

    return text
