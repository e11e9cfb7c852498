"""Domain errors raised by the models and turned into HTTP responses in main."""


class YouPowerError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(YouPowerError):
    status_code = 404


class ForbiddenError(YouPowerError):
    status_code = 403
