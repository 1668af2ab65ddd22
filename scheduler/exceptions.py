class SchedulerError(Exception):
    """Base class for errors rendered to the caller as a short message."""

    code = "scheduler_error"
    status_code = 400
    default_message = "Please try again"

    def __init__(self, message: str = None, details: dict = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


# Validation

class ValidationError(SchedulerError):
    code = "validation_error"
    status_code = 422


class WeakPassword(ValidationError):
    code = "weak_password"
    default_message = "Please use a strong password"


class InvalidDate(ValidationError):
    code = "invalid_date"
    default_message = "Please enter a valid date!"


# Authentication and session state

class AuthError(SchedulerError):
    code = "auth_error"
    status_code = 401


class NotAuthenticated(AuthError):
    code = "not_authenticated"
    default_message = "Please login first"


class WrongRole(AuthError):
    code = "wrong_role"
    status_code = 403

    def __init__(self, required_role: str):
        self.required_role = required_role
        super().__init__(f"Please login as a {required_role}", {"required_role": required_role})


class AlreadyLoggedIn(AuthError):
    code = "already_logged_in"
    status_code = 409
    default_message = "User already logged in."


class NotLoggedIn(AuthError):
    code = "not_logged_in"
    default_message = "Please login first"


class InvalidCredentials(AuthError):
    code = "invalid_credentials"
    default_message = "Login failed."


# Conflicts with current state

class ConflictError(SchedulerError):
    code = "conflict"
    status_code = 409


class UsernameTaken(ConflictError):
    code = "username_taken"
    default_message = "Username taken, try again!"


class NoCaregiverAvailable(ConflictError):
    code = "no_caregiver_available"
    default_message = "No caregiver is available"


class OutOfStock(ConflictError):
    code = "out_of_stock"
    default_message = "Not enough available doses"


class VaccineUnknown(ConflictError):
    code = "vaccine_unknown"
    status_code = 404
    default_message = "No such vaccine"


# Ownership and lookup

class OwnershipError(SchedulerError):
    code = "ownership_error"
    status_code = 403


class NotOwner(OwnershipError):
    code = "not_owner"
    default_message = "You can only cancel your appointments"


class NotFoundError(SchedulerError):
    code = "not_found"
    status_code = 404


class ReservationNotFound(NotFoundError):
    code = "reservation_not_found"
    default_message = "No appointments found"


# Persistence

class StoreError(SchedulerError):
    code = "store_error"
    status_code = 503
    default_message = "Please try again"
