class StatsError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StatValidationError(StatsError):
    status_code = 400


class StatNotFound(StatsError):
    status_code = 404


class NotAuthorized(StatsError):
    status_code = 403
