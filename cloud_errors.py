"""
Protocol Error Taxonomy
=======================

Every failure of the cloud protocol is reported as a subclass of
ProtocolError. The transport layer maps ``code`` onto the wire and
``http_status`` onto the REST response.

Errors:
-------
- ValidationError: zero, missing or ill-typed required field
- SessionStateError: session not in the state the operation requires
- DuplicateCommitmentError: timestamp reused within a session
- InvalidPointError: coordinate pair is not a valid G1 element
- MismatchError: claimed aggregate differs from the accumulated one
- InternalFatal: unexpected failure in a collaborator, wrapped at the
  service boundary
"""


class ProtocolError(Exception):
    """Base class of all errors reported to a car."""

    code = "protocol_error"
    http_status = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {'code': self.code, 'error': self.message}


class ValidationError(ProtocolError):
    code = "validation_error"
    http_status = 400


class SessionStateError(ProtocolError):
    code = "session_state_error"
    http_status = 404


class DuplicateCommitmentError(ProtocolError):
    code = "duplicate_commitment"
    http_status = 409


class InvalidPointError(ProtocolError):
    code = "invalid_point"
    http_status = 400


class MismatchError(ProtocolError):
    code = "mismatch"
    http_status = 403


class InternalFatal(ProtocolError):
    code = "internal_fatal"
    http_status = 500
