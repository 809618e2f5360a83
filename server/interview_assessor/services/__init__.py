from .gemini_assessor import GeminiAssessor
from .insights import InsightGenerator
from .keyword_analyzer import KeywordAnalyzer
from .media import AudioExtractor
from .orchestrator import AnalysisOrchestrator, MediaInput
from .scoring import ScoreAggregator
from .topic_extractor import TopicExtractor
from .transcriber import GeminiTranscriber

__all__ = [
    "GeminiAssessor",
    "InsightGenerator",
    "KeywordAnalyzer",
    "AudioExtractor",
    "AnalysisOrchestrator",
    "MediaInput",
    "ScoreAggregator",
    "TopicExtractor",
    "GeminiTranscriber",
]
