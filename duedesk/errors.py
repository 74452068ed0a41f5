# duedesk/errors.py
"""
Error taxonomy shared by the store, the payment rules and the API layer.

Each error carries the HTTP status the API answers with; the handler in
duedesk.main turns them into the {"success": false, "error": ...} envelope.
"""


class DueDeskError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DueDeskError):
    """Missing or malformed input. The caller can fix it and resend."""

    status_code = 400


class DuplicateEmailError(DueDeskError):
    status_code = 409

    def __init__(self, message: str = "Customer with this email already exists"):
        super().__init__(message)


class NotFoundError(DueDeskError):
    status_code = 404

    def __init__(self, message: str = "Customer not found"):
        super().__init__(message)


class StoreError(DueDeskError):
    """Persistence failure. The message sent to clients stays opaque."""

    status_code = 500

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message)
