"""Custom exceptions for subextract."""

class SubExtractError(Exception):
    """Base exception for subextract."""
    pass

class VideoError(SubExtractError):
    """Error opening, seeking or reading a video."""

    def __init__(self, message: str, log=None):
        super().__init__(message)
        self.log = list(log) if log else []

class OCRError(SubExtractError):
    """Error initializing or running the OCR engine."""
    pass

class ExportError(SubExtractError):
    """Error writing subtitle files."""
    pass

class ValidationError(SubExtractError):
    """Invalid input parameters."""
    pass

class ConfigError(SubExtractError):
    """Invalid configuration values."""
    pass
