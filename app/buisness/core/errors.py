"""
Domain exceptions for the asset request workflow and the ledgers it touches

These exceptions represent business rule violations and are raised by the
business layer. Each carries a machine-readable code and the HTTP status the
API layer answers with; the message is safe to show to the caller.
"""


class AssetVerseError(Exception):
    """Base exception for all domain errors"""
    code = 'error'
    http_status = 400

    def __init__(self, message, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        payload = {'message': self.message, 'code': self.code}
        if self.details:
            payload['details'] = self.details
        return payload


class InvalidInputError(AssetVerseError):
    """Raised for missing or malformed fields and identifiers"""
    code = 'invalid_input'
    http_status = 400


class NotFoundError(AssetVerseError):
    """Raised when an entity is absent or not owned by the caller (deliberately indistinguishable)"""
    code = 'not_found'
    http_status = 404


class ConflictError(AssetVerseError):
    """Raised on state machine violations and duplicates"""
    code = 'conflict'
    http_status = 409


class UnavailableError(AssetVerseError):
    """Raised when inventory is exhausted or a collaborator is not reachable"""
    code = 'unavailable'
    http_status = 409


class QuotaExceededError(AssetVerseError):
    """Raised when an HR account has reached its capacity limit"""
    code = 'quota_exceeded'
    http_status = 403


class InvalidOperationError(AssetVerseError):
    """Raised when an operation does not apply to the entity (e.g. returning a non-returnable asset)"""
    code = 'invalid_operation'
    http_status = 400


class InvalidCredentialsError(AssetVerseError):
    """Raised when an email/password pair does not match"""
    code = 'invalid_credentials'
    http_status = 401
