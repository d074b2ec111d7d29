"""Error taxonomy raised by the service layer.

Each error carries the HTTP status the blueprints answer with; the app
factory turns them into ``{'error': message}`` JSON responses.
"""


class UtilizationError(Exception):
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class AuthorizationError(UtilizationError):
    """Actor missing (401) or role insufficient (403)"""
    status_code = 403


class ValidationError(UtilizationError):
    """Malformed input, rejected before any write"""
    status_code = 400


class NotFoundError(ValidationError):
    """Referenced consultant, project, request or allocation is absent"""
    status_code = 404


class StateConflictError(UtilizationError):
    """Operation not allowed in the record's current state"""
    status_code = 409
