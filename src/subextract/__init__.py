"""subextract - extract burnt-in subtitles from video with OCR."""

__version__ = "0.1.0"
