class ClientError(Exception):
    """A send that produced no reply."""


class NetworkError(ClientError):
    """The backend could not be reached or did not answer in time."""


class ServerError(ClientError):
    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code
