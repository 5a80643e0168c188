"""Image to text through the Tesseract OCR engine.

Stages images in a per-call scratch directory, runs the ``tesseract``
executable on them, and reads back the extracted text.
"""
