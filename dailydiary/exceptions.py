"""
Domain errors raised by the credential store, the authenticator,
the diary store and the access gateway.

Routers translate these into HTTP responses. Each error carries a
message that is safe to show to the end user.
"""


class DiaryAppError(Exception):
    """Base class for all caller-facing errors."""

    message = "Request could not be completed"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class UsernameTaken(DiaryAppError):
    message = "Username is already taken"


class WeakPassword(DiaryAppError):
    message = "Password is too short"


class PasswordMismatch(DiaryAppError):
    message = "Passwords do not match"


class InvalidCredentials(DiaryAppError):
    """
    Raised for a failed login.

    Same message whether the username is unknown or the password is wrong,
    so login responses never reveal which accounts exist.
    """
    message = "Invalid username or password"


class UserNotFound(DiaryAppError):
    message = "User not found"


class CurrentPasswordWrong(DiaryAppError):
    message = "Current password is incorrect"


class NotFoundOrForbidden(DiaryAppError):
    """
    Raised when a diary entry is missing or owned by someone else.

    The two cases are deliberately indistinguishable.
    """
    message = "Diary not found or you don't have permission to access it"


class Unauthenticated(DiaryAppError):
    message = "Not authenticated. Please sign in."


class SessionInvalid(DiaryAppError):
    message = "Session expired. Please sign in again."
