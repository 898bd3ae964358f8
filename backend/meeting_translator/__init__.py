"""Live meeting translation backend: streamed host audio in, translated captions out."""

__version__ = "1.0.0"
