class AppError(Exception):
    """Base application error"""


class ConfigError(AppError):
    """Missing or invalid configuration"""


class ValidationError(AppError):
    """Malformed caller input (message, session id, pagination, title)"""


class NotFoundError(AppError):
    """Requested resource does not exist or is not visible to the caller"""


class SessionNotFoundError(NotFoundError):
    """Session missing, soft-deleted, or owned by someone else"""


class CredentialError(AppError):
    """Token rejected by the credential validator"""


class UpstreamError(AppError):
    """Completion backend failure"""


class CompletionTimeoutError(UpstreamError):
    """Completion backend did not answer in time"""


class MalformedCompletionError(UpstreamError):
    """Completion backend answered without usable text"""


class DatabaseError(AppError):
    """MongoDB connection or query failure"""


class ConcurrentUpdateError(DatabaseError):
    """Session was modified by another writer since it was read"""
