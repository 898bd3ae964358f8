"""
Pipeline Exceptions

Custom exceptions raised by the stages of the translation pipeline.
None of these reach the end user; the controller degrades the affected
stage to an empty output and logs the failure.
"""
from typing import Optional


class PipelineError(Exception):
    """Base exception for translation pipeline errors"""
    pass


class ProcessError(PipelineError):
    """Raised when the external transcode process fails for a chunk"""

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class EngineError(PipelineError):
    """Raised when a transcription or translation engine call fails"""

    def __init__(self, engine: str, message: str):
        super().__init__(f"{engine}: {message}")
        self.engine = engine


class MalformedInputError(PipelineError):
    """Raised for a glossary row that lacks a source or target term"""
    pass
