class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class InvalidRequestError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class ForbiddenError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class InternalServerError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 500)


class ServiceUnavailableError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 503)
