"""Frame access, subtitle-band preprocessing and OCR backends."""
