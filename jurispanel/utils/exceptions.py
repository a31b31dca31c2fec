"""
Custom exception classes
"""
from fastapi import HTTPException


class CaseNotFoundError(HTTPException):
    """Raised when a case is not part of the working session"""
    def __init__(self, case_id: str):
        super().__init__(
            status_code=404,
            detail=f"Case {case_id} not found"
        )


class SessionNotFoundError(HTTPException):
    """Raised when a saved session doesn't exist in the requested state"""
    def __init__(self, session_id: str):
        super().__init__(
            status_code=404,
            detail=f"Session {session_id} not found"
        )


class EmptySessionError(HTTPException):
    """Raised when saving a workspace with no metadata or no cases"""
    def __init__(self):
        super().__init__(
            status_code=400,
            detail="Nothing to save: the working session has no cases"
        )


class NoteDeletionNotConfirmedError(HTTPException):
    """Raised when a note deletion arrives without explicit confirmation"""
    def __init__(self, case_id: str):
        super().__init__(
            status_code=400,
            detail=f"Deleting the note on case {case_id} requires confirmation"
        )


class EmptyDocumentError(HTTPException):
    """Raised when an upload carries no usable content"""
    def __init__(self):
        super().__init__(
            status_code=400,
            detail="The uploaded document is empty"
        )


class UnsupportedDocumentError(HTTPException):
    """Raised when an upload is neither PDF, DOCX nor text"""
    def __init__(self, reason: str = "Unsupported document type"):
        super().__init__(
            status_code=415,
            detail=reason
        )


class ExtractionInProgressError(HTTPException):
    """Raised when a second extraction is submitted while one is running"""
    def __init__(self):
        super().__init__(
            status_code=409,
            detail="An extraction is already in progress"
        )


class PersistenceError(HTTPException):
    """Raised when the session store fails to save or delete"""
    def __init__(self, reason: str = "Unknown error"):
        super().__init__(
            status_code=500,
            detail=f"Persistence failed: {reason}"
        )


class AIServiceError(HTTPException):
    """Raised when AI service fails"""
    def __init__(self, reason: str = "AI service unavailable"):
        super().__init__(
            status_code=503,
            detail=f"AI service error: {reason}"
        )
