"""Error taxonomy shared by services and blueprints."""


class MaplasError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self):
        return {"error": self.message}


class ValidationError(MaplasError):
    status_code = 400
    message = "Invalid request"


class AuthError(MaplasError):
    status_code = 401
    message = "Invalid credentials"


class ForbiddenError(MaplasError):
    status_code = 403
    message = "Forbidden: Admins only"


class NotFoundError(MaplasError):
    status_code = 404
    message = "Not found"


class ConflictError(MaplasError):
    status_code = 409
    message = "Conflict"


class StoreError(MaplasError):
    status_code = 500
    message = "Database error"
