"""Quote of the day selection."""

import random
from typing import Optional

from moodiary.models import Quote, QuoteCard

PASTEL_COLORS = [
    "#FFE4E1",
    "#E8F5E9",
    "#FFF3E0",
    "#E3F2FD",
    "#F3E5F5",
    "#FFF9C4",
    "#E0F7FA",
    "#FCE4EC",
]

DEFAULT_QUOTES = [
    Quote(id="q1", text="The journal is a vehicle for my sense of selfhood.", author="Susan Sontag", category="writing"),
    Quote(id="q2", text="Fill your paper with the breathings of your heart.", author="William Wordsworth", category="writing"),
    Quote(id="q3", text="Small steps every day add up to big results.", author="Unknown", category="motivation"),
    Quote(id="q4", text="Be gentle with yourself, you're doing the best you can.", author="Unknown", category="self-care"),
    Quote(id="q5", text="What we think, we become.", author="Buddha", category="mindfulness"),
    Quote(id="q6", text="Where there is love there is life.", author="Mahatma Gandhi", category="love"),
    Quote(id="q7", text="You don't have to see the whole staircase, just take the first step.", author="Martin Luther King Jr.", category="motivation"),
    Quote(id="q8", text="Almost everything will work again if you unplug it for a few minutes, including you.", author="Anne Lamott", category="self-care"),
]


def get_random_quote(
    quotes: Optional[list[Quote]],
    previous_quote_id: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> Optional[QuoteCard]:
    """Pick a random quote and a pastel background for it.

    Args:
        quotes: Quotes to choose from.
        previous_quote_id: ID of the quote shown last time; skipped when
            another quote is available.
        rng: Random source, defaults to the module-level generator.

    Returns:
        QuoteCard, or None if there are no quotes.
    """
    if not quotes:
        return None

    rng = rng or random
    pool = quotes
    if len(quotes) > 1 and previous_quote_id:
        pool = [quote for quote in quotes if quote.id != previous_quote_id] or quotes

    quote = rng.choice(pool)
    return QuoteCard(**quote.model_dump(), background_color=rng.choice(PASTEL_COLORS))
