class LeaderboardError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(LeaderboardError):
    status_code = 400


class NotFound(LeaderboardError):
    status_code = 404
