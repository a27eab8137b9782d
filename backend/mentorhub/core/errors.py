class ServiceError(Exception):
    """Base for expected failures raised by the service layer."""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409


class DuplicateSignupError(ConflictError):
    def __init__(self, detail: str = "Already signed up for this shift"):
        super().__init__(detail)


class ForbiddenError(ServiceError):
    status_code = 403
