"""Errors raised by the glue around the pricing/search core"""
from typing import Optional


class BackendError(Exception):
    """The backend-as-a-service answered with an error or an unusable payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ServiceNotFound(Exception):
    def __init__(self, service_id: str):
        super().__init__(f"Service {service_id} not found")
        self.service_id = service_id


class RequestInvalid(Exception):
    """A service request failed the validation gate and cannot be submitted."""

    def __init__(self, state):
        super().__init__("Service request is not ready to submit")
        self.state = state
