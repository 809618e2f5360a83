from typing import Optional

from .errors import InputError


# (substring, topic label) checks, applied in this order
TOPIC_CHECKS: tuple[tuple[str, str], ...] = (
    ("customer", "Customer Service"),
    ("komunikasi", "Komunikasi"),
    ("team", "Kerja Tim"),
    ("masalah", "Problem Solving"),
    ("konflik", "Manajemen Konflik"),
    ("target", "Target Orientation"),
    ("digital", "Digital Banking"),
    ("layanan", "Service Excellence"),
    ("produk", "Product Knowledge"),
    ("compliance", "Compliance & Ethics"),
)

PADDING_TOPICS: tuple[str, ...] = ("Professional Development", "Adaptability", "Initiative")
MIN_MATCHED_TOPICS = 5
MAX_TOPICS = 10


class TopicExtractor:
    """Keyword topic extraction used when the AI topic call fails."""

    def extract(self, transcript: Optional[str]) -> list[str]:
        if transcript is None:
            raise InputError("Transcript is required for topic extraction")

        lower_transcript = transcript.lower()
        topics = [topic for keyword, topic in TOPIC_CHECKS if keyword in lower_transcript]

        # Padding is appended once; with few matches the list can stay below five.
        if len(topics) < MIN_MATCHED_TOPICS:
            topics.extend(PADDING_TOPICS)

        return topics[:MAX_TOPICS]
