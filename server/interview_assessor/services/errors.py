"""Error taxonomy for the analysis pipeline."""


class AssessmentError(Exception):
    """Base class for all analysis pipeline errors."""
    pass


class InputError(AssessmentError):
    """Raised when no usable transcript or media was supplied."""
    pass


class MethodError(AssessmentError):
    """Raised for unsupported HTTP verbs."""
    pass


class TranscriptionError(AssessmentError):
    """Raised when the speech-to-text service fails."""
    pass


class MediaProcessingError(AssessmentError):
    """Raised when audio cannot be extracted from an uploaded video."""
    pass


class AIServiceError(AssessmentError):
    """Raised when the language-model call fails or returns an unusable reply."""
    pass


class UploadTooLargeError(InputError):
    """Raised when an uploaded recording exceeds the configured size cap."""
    pass
