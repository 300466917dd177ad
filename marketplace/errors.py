"""Domain errors raised by the services and rendered by the app's error handler."""


class MarketplaceError(Exception):
    status_code = 400
    code = "error"

    def __init__(self, detail=None):
        super().__init__(detail or self.code)
        self.detail = detail or self.code

    def to_dict(self):
        return {"error": self.code, "detail": self.detail}


class ValidationFailure(MarketplaceError):
    status_code = 400
    code = "validation_failed"


class Unauthorized(MarketplaceError):
    status_code = 401
    code = "unauthorized"


class InvalidCredentials(Unauthorized):
    code = "invalid_credentials"


class Forbidden(MarketplaceError):
    status_code = 403
    code = "forbidden"


class NotFound(MarketplaceError):
    status_code = 404
    code = "not_found"


class UserNotFound(NotFound):
    code = "user_not_found"


class ListingNotFound(NotFound):
    code = "listing_not_found"


class RequestNotFound(NotFound):
    code = "request_not_found"


class Conflict(MarketplaceError):
    status_code = 409
    code = "conflict"


class DuplicateEmail(Conflict):
    code = "email_exists"


class ListingUnavailable(Conflict):
    code = "listing_unavailable"


class IllegalTransition(Conflict):
    code = "illegal_transition"


class SelfDeleteForbidden(MarketplaceError):
    status_code = 400
    code = "self_delete_forbidden"
