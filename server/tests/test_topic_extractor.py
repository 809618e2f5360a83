import pytest

from interview_assessor.services.errors import InputError
from interview_assessor.services.topic_extractor import PADDING_TOPICS, TopicExtractor


def test_matched_topics_follow_check_order():
    topics = TopicExtractor().extract("Saya menangani konflik dengan customer")
    assert topics == ["Customer Service", "Manajemen Konflik", *PADDING_TOPICS]


def test_no_matches_yields_only_padding():
    assert TopicExtractor().extract("halo selamat pagi") == list(PADDING_TOPICS)


def test_empty_transcript_yields_only_padding():
    assert TopicExtractor().extract("") == list(PADDING_TOPICS)


def test_substring_and_case_insensitive_matching():
    topics = TopicExtractor().extract("Teamwork with CUSTOMERS")
    assert topics[:2] == ["Customer Service", "Kerja Tim"]


def test_five_matches_skip_padding():
    topics = TopicExtractor().extract("customer komunikasi team masalah konflik")
    assert topics == [
        "Customer Service",
        "Komunikasi",
        "Kerja Tim",
        "Problem Solving",
        "Manajemen Konflik",
    ]


def test_four_matches_pad_to_seven():
    topics = TopicExtractor().extract("target digital layanan produk")
    assert len(topics) == 7
    assert topics[-3:] == list(PADDING_TOPICS)


def test_every_check_matching_is_capped_at_ten():
    transcript = "customer komunikasi team masalah konflik target digital layanan produk compliance"
    topics = TopicExtractor().extract(transcript)
    assert len(topics) == 10
    assert topics[-1] == "Compliance & Ethics"
    assert not set(PADDING_TOPICS) & set(topics)


def test_missing_transcript_raises_input_error():
    with pytest.raises(InputError):
        TopicExtractor().extract(None)
