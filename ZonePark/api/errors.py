from fastapi import status


class ZoneParkError(Exception):
    """Base class for errors raised by the ZonePark core.

    Each subclass carries the HTTP status the API layer answers with.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request failed."

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFound(ZoneParkError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found."


class Conflict(ZoneParkError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Vehicle already has an active session."


class InvalidState(ZoneParkError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Parking session is already stopped."


class InvalidInput(ZoneParkError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Invalid input."
