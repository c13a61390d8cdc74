"""Known newsletter senders and sender-based identification."""

from src.newsletters.models import NewsletterName

# Sender addresses polled for new issues
NEWSLETTER_SENDERS: dict[NewsletterName, tuple[str, ...]] = {
    NewsletterName.THE_NEURON: ("theneuron@newsletter.theneurondaily.com",),
    NewsletterName.TLDR: ("dan@tldrnewsletter.com",),
    NewsletterName.THE_RUNDOWN: ("news@daily.therundown.ai",),
    NewsletterName.FUTURETOOLS: ("futuretools@mail.beehiiv.com",),
    NewsletterName.AI_BREAKFAST: ("aibreakfast@mail.beehiiv.com",),
}

# Checked in order against the lower-cased sender
SENDER_MARKERS: tuple[tuple[tuple[str, ...], NewsletterName], ...] = (
    (("theneuron", "neurondaily"), NewsletterName.THE_NEURON),
    (("tldr",), NewsletterName.TLDR),
    (("rundown",), NewsletterName.THE_RUNDOWN),
    (("futuretools",), NewsletterName.FUTURETOOLS),
    (("aibreakfast",), NewsletterName.AI_BREAKFAST),
)


def identify_newsletter(sender: str) -> NewsletterName:
    """Determine which newsletter an email came from.

    :param sender: The sender display name and/or address.
    :returns: The newsletter, or UNKNOWN if the sender is not recognised.
    """
    sender_lower = sender.lower()

    for markers, newsletter in SENDER_MARKERS:
        if any(marker in sender_lower for marker in markers):
            return newsletter

    return NewsletterName.UNKNOWN


def sender_addresses() -> list[str]:
    """Get every sender address to poll, in a stable order.

    :returns: The sender addresses.
    """
    return [address for addresses in NEWSLETTER_SENDERS.values() for address in addresses]
