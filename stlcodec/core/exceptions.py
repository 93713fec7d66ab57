"""Custom exceptions for stlcodec."""

from typing import Any, Optional


class StlCodecError(Exception):
    """Base exception for stlcodec."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(StlCodecError):
    """Raised when configuration is invalid."""

    pass


class DecodeError(StlCodecError):
    """Raised when an STL byte source cannot be decoded."""

    pass


class TruncatedInputError(DecodeError):
    """Raised when the input ends where more data is structurally required."""

    def __init__(self, expected: str, details: Optional[dict[str, Any]] = None):
        super().__init__(f"Unexpected end of input while expecting {expected}", details)
        self.expected = expected


class MalformedStructureError(DecodeError):
    """Raised when a keyword, token count or header does not match the grammar."""

    def __init__(self, expected: str, found: Any):
        super().__init__(f"Expected {expected}, got {found!r}")
        self.expected = expected
        self.found = found


class InvalidNumericError(DecodeError):
    """Raised when a numeric token is unparseable or not finite."""

    def __init__(self, token: str, reason: str):
        super().__init__(f"Invalid numeric value {token!r}: {reason}")
        self.token = token
        self.reason = reason


class EncodeError(StlCodecError):
    """Raised when a triangle sequence breaks the binary encoder's contract."""

    pass


class MeshValidationError(StlCodecError):
    """Raised when an indexed mesh is not a closed, oriented manifold."""

    pass


class DegenerateFaceError(MeshValidationError):
    """Raised when a face has (near) zero area."""

    def __init__(self, face_index: int, area: float):
        super().__init__(f"Face #{face_index} has a zero-area face (area={area:g})")
        self.face_index = face_index
        self.area = area


class UnmatchedEdgeError(MeshValidationError):
    """Raised when a directed edge has no oppositely oriented partner."""

    def __init__(self, face_index: int, edge_start: int, edge_end: int, remaining: int = 1):
        super().__init__(
            f"Did not find facing edge for face #{face_index}, "
            f"edge #v{edge_start} -> #v{edge_end}",
            details={"unmatched_edges": remaining},
        )
        self.face_index = face_index
        self.edge_start = edge_start
        self.edge_end = edge_end
