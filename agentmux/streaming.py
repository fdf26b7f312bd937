import asyncio
import re
from typing import Callable, List

# Pacing used to emulate token streaming from a completed response
STREAM_BATCH_SIZE = 3
STREAM_DELAY_SECONDS = 0.018

_WHITESPACE = re.compile(r"(\s+)")


def split_words(text: str) -> List[str]:
    """
    Split text into words and the whitespace runs between them.

    Joining the result gives back the original text.
    """
    return [piece for piece in _WHITESPACE.split(text) if piece]


async def simulate_stream(
    text: str,
    on_text: Callable[[str], None],
    *,
    batch_size: int = STREAM_BATCH_SIZE,
    delay: float = STREAM_DELAY_SECONDS,
) -> None:
    """
    Deliver a complete text to `on_text` in small batches, as if streamed.

    Args:
        text (str): The full text to emit.
        on_text (Callable): Receives each chunk.
        batch_size (int): Number of pieces (words or whitespace runs) per chunk.
        delay (float): Seconds to sleep after each chunk.
    """
    pieces = split_words(text)
    for i in range(0, len(pieces), batch_size):
        on_text("".join(pieces[i:i + batch_size]))
        await asyncio.sleep(delay)
