import asyncio
import os
import random

import pytest

from interview_assessor.models import COMPETENCY_KEYS, CompetencySet
from interview_assessor.services.errors import (
    AIServiceError,
    InputError,
    MediaProcessingError,
    TranscriptionError,
)
from interview_assessor.services.orchestrator import AnalysisOrchestrator, MediaInput

SCENARIO_TRANSCRIPT = (
    "Saya akan mendengarkan pelanggan dengan analisis yang tenang dan mencari solusi konflik."
)


def _competency_set(*scores):
    return CompetencySet.model_validate(
        {key: {"score": score, "analysis": "AI"} for key, score in zip(COMPETENCY_KEYS, scores)}
    )


class _FailingAssessor:
    async def score_competencies(self, transcript):
        raise AIServiceError("Competency scoring timed out after 45s")

    async def extract_topics(self, transcript):
        raise AIServiceError("Topic extraction returned invalid JSON")


class _StaticAssessor:
    def __init__(self, scores, topics):
        self.scores = scores
        self.topics = topics
        self.transcripts = []

    async def score_competencies(self, transcript):
        self.transcripts.append(transcript)
        return self.scores

    async def extract_topics(self, transcript):
        return self.topics


class _MockAssessor:
    """Seeded random scores standing in for the model during demos and tests."""

    def __init__(self, seed):
        self._random = random.Random(seed)

    async def score_competencies(self, transcript):
        return _competency_set(*(self._random.randint(60, 95) for _ in COMPETENCY_KEYS))

    async def extract_topics(self, transcript):
        return ["Customer Service", "Komunikasi"]


class _TopicsOnlyFailing(_StaticAssessor):
    async def extract_topics(self, transcript):
        raise AIServiceError("Topic extraction timed out after 45s")


class _FakeTranscriber:
    def __init__(self, text="Saya melayani pelanggan dengan tenang", error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def transcribe(self, audio_path, mime_type="audio/mpeg"):
        self.calls.append((audio_path, mime_type, os.path.exists(audio_path)))
        if self.error:
            raise self.error
        return self.text


class _FakeExtractor:
    def __init__(self, duration=125.0, fail=False):
        self.duration = duration
        self.fail = fail
        self.extracted = []

    async def probe_duration(self, media_path):
        return self.duration

    async def extract_audio(self, video_path, output_path):
        self.extracted.append((video_path, output_path))
        if self.fail:
            raise MediaProcessingError("Audio extraction failed: no audio stream")
        with open(output_path, "wb") as f:
            f.write(b"mp3")
        return output_path


def _media(tmp_path, name="interview.mp4", content_type="video/mp4"):
    path = tmp_path / name
    path.write_bytes(b"\x00\x00\x00\x18ftypmp4")
    return MediaInput(path=str(path), content_type=content_type, file_name=name)


def test_keyword_fallback_when_ai_fails():
    orchestrator = AnalysisOrchestrator(assessor=_FailingAssessor())
    report = asyncio.run(orchestrator.run(transcript=SCENARIO_TRANSCRIPT))

    assert report.scores.score_values() == {
        "publicSpeaking": 70,
        "analyticalThinking": 60,
        "criticalThinking": 50,
        "problemSolving": 60,
        "presentationSkills": 50,
        "conflictManagement": 60,
    }
    assert report.overall_score == 58
    assert report.recommendation.status == "CONDITIONAL"
    assert report.recommendation.priority == "LOW"
    assert report.topics == ["Manajemen Konflik", "Professional Development", "Adaptability", "Initiative"]
    assert report.insights.strengths == []
    assert report.insights.development_areas == ["Critical Thinking", "Presentation Skills"]
    assert report.transcript == SCENARIO_TRANSCRIPT
    assert report.file_name == "interview_video.mp4"
    assert report.duration == "N/A"
    assert report.metadata.confidence == 0.95
    assert report.metadata.version == "2.0.0"
    assert report.metadata.processing_time.endswith("s")


def test_fallback_is_logged(caplog):
    orchestrator = AnalysisOrchestrator(assessor=_FailingAssessor())
    with caplog.at_level("WARNING", logger="interview_assessor.services.orchestrator"):
        asyncio.run(orchestrator.run(transcript=SCENARIO_TRANSCRIPT))
    assert "AI competency scoring failed" in caplog.text
    assert "AI topic extraction failed" in caplog.text


def test_without_assessor_uses_keyword_analysis():
    with_failures = asyncio.run(AnalysisOrchestrator(assessor=_FailingAssessor()).run(transcript=SCENARIO_TRANSCRIPT))
    keyword_only = asyncio.run(AnalysisOrchestrator().run(transcript=SCENARIO_TRANSCRIPT))
    assert keyword_only.scores == with_failures.scores
    assert keyword_only.topics == with_failures.topics


def test_ai_results_are_used_when_available():
    assessor = _StaticAssessor(_competency_set(90, 88, 86, 85, 92, 87), ["Customer Service", "Komunikasi"])
    report = asyncio.run(AnalysisOrchestrator(assessor=assessor).run(transcript="Saya", file_name="a.mp4"))

    assert report.overall_score == 88
    assert report.recommendation.status == "HIGHLY_RECOMMENDED"
    assert report.topics == ["Customer Service", "Komunikasi"]
    assert report.scores.public_speaking.analysis == "AI"
    assert report.insights.strengths == [
        "Public Speaking",
        "Analytical Thinking",
        "Critical Thinking",
        "Problem Solving",
        "Presentation Skills",
        "Conflict Management",
    ]
    assert report.file_name == "a.mp4"


def test_topic_failure_falls_back_independently():
    assessor = _TopicsOnlyFailing(_competency_set(70, 70, 70, 70, 70, 70), ["unused"])
    report = asyncio.run(AnalysisOrchestrator(assessor=assessor).run(transcript="masalah customer"))

    assert report.scores.public_speaking.analysis == "AI"
    assert report.topics[:2] == ["Customer Service", "Problem Solving"]


def test_mock_assessor_report_is_consistent():
    report = asyncio.run(AnalysisOrchestrator(assessor=_MockAssessor(seed=7)).run(transcript="Saya"))
    values = list(report.scores.score_values().values())

    assert all(60 <= value <= 95 for value in values)
    assert 60 <= report.overall_score <= 95
    assert report.overall_score == AnalysisOrchestrator().aggregator.aggregate(report.scores)


def test_missing_input_is_rejected():
    with pytest.raises(InputError):
        asyncio.run(AnalysisOrchestrator().run())


def test_blank_transcript_without_media_is_rejected():
    with pytest.raises(InputError):
        asyncio.run(AnalysisOrchestrator().run(transcript="   \n\t"))


def test_transcript_wins_over_media(tmp_path):
    transcriber = _FakeTranscriber()
    orchestrator = AnalysisOrchestrator(transcriber=transcriber, audio_extractor=_FakeExtractor())
    report = asyncio.run(orchestrator.run(transcript="Saya", media=_media(tmp_path)))

    assert report.transcript == "Saya"
    assert transcriber.calls == []


def test_media_without_transcriber_is_rejected(tmp_path):
    with pytest.raises(InputError):
        asyncio.run(AnalysisOrchestrator().run(media=_media(tmp_path)))


def test_audio_is_transcribed_directly(tmp_path):
    transcriber = _FakeTranscriber()
    extractor = _FakeExtractor(duration=125.0)
    orchestrator = AnalysisOrchestrator(transcriber=transcriber, audio_extractor=extractor)
    media = _media(tmp_path, name="call.wav", content_type="audio/wav")

    report = asyncio.run(orchestrator.run(media=media))

    assert transcriber.calls == [(media.path, "audio/wav", True)]
    assert extractor.extracted == []
    assert report.transcript == "Saya melayani pelanggan dengan tenang"
    assert report.duration == "02:05"
    assert report.file_name == "call.wav"


def test_video_audio_is_extracted_and_cleaned_up(tmp_path):
    transcriber = _FakeTranscriber()
    extractor = _FakeExtractor(duration=3725)
    orchestrator = AnalysisOrchestrator(
        transcriber=transcriber,
        audio_extractor=extractor,
        tmp_dir=str(tmp_path),
    )
    media = _media(tmp_path)

    report = asyncio.run(orchestrator.run(media=media, file_name="final.mp4"))

    (video_path, audio_path), = extractor.extracted
    assert video_path == media.path
    assert audio_path.endswith(".mp3")
    assert transcriber.calls == [(audio_path, "audio/mpeg", True)]
    assert not os.path.exists(audio_path)
    assert report.duration == "1:02:05"
    assert report.file_name == "final.mp4"


def test_extraction_failure_propagates_and_cleans_up(tmp_path):
    extractor = _FakeExtractor(fail=True)
    orchestrator = AnalysisOrchestrator(
        transcriber=_FakeTranscriber(),
        audio_extractor=extractor,
        tmp_dir=str(tmp_path),
    )
    with pytest.raises(MediaProcessingError):
        asyncio.run(orchestrator.run(media=_media(tmp_path)))

    (_, audio_path), = extractor.extracted
    assert not os.path.exists(audio_path)


def test_video_without_extractor_is_a_processing_error(tmp_path):
    orchestrator = AnalysisOrchestrator(transcriber=_FakeTranscriber())
    with pytest.raises(MediaProcessingError):
        asyncio.run(orchestrator.run(media=_media(tmp_path)))


def test_transcription_error_propagates(tmp_path):
    transcriber = _FakeTranscriber(error=TranscriptionError("Transcription failed: 503"))
    orchestrator = AnalysisOrchestrator(transcriber=transcriber, audio_extractor=_FakeExtractor())
    with pytest.raises(TranscriptionError):
        asyncio.run(orchestrator.run(media=_media(tmp_path, "a.mp3", "audio/mpeg")))


def test_empty_transcription_is_rejected(tmp_path):
    orchestrator = AnalysisOrchestrator(transcriber=_FakeTranscriber(text="  "), audio_extractor=_FakeExtractor())
    with pytest.raises(InputError):
        asyncio.run(orchestrator.run(media=_media(tmp_path, "a.mp3", "audio/mpeg")))
