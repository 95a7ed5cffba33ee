# sqlite_editor/errors.py
from __future__ import annotations


class UserInputError(Exception):
    status_code = 400


class NotFoundError(Exception):
    status_code = 404


class ConflictError(Exception):
    status_code = 409


class UnprocessableEntityError(Exception):
    status_code = 422


class DatabaseError(Exception):
    status_code = 500


# 400
class MissingSessionError(UserInputError):
    def __init__(self, message: str = "No session ID provided"):
        super().__init__(message)


class InvalidInputError(UserInputError):
    pass


class UnsupportedQueryTypeError(UserInputError):
    pass


class MultiStatementError(UserInputError):
    def __init__(self, message: str = "Multiple SQL statements are not allowed for security reasons"):
        super().__init__(message)


class MissingRequiredFieldError(UserInputError):
    pass


class InvalidUploadError(UserInputError):
    pass


# 404
class SessionNotFoundError(NotFoundError):
    def __init__(self, message: str = "No database file found for this session"):
        super().__init__(message)


class TableNotFoundError(NotFoundError):
    def __init__(self, message: str = "Table not found"):
        super().__init__(message)


class ColumnNotFoundError(NotFoundError):
    pass


# 500
class InternalError(DatabaseError):
    pass


class DatabaseUnavailableError(DatabaseError):
    pass


class RowNotFoundError(DatabaseError):
    def __init__(self, message: str = "Row not found with the specified identifiers"):
        super().__init__(message)
