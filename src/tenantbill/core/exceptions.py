"""Errors raised by the billing core."""


class BillingError(Exception):
    """Base class for every rejection raised by the billing core."""


class ValidationError(BillingError):
    """Malformed or out-of-policy input (empty name, inverted readings, ...)."""


class DuplicateNameError(BillingError):
    """A tenant with the same name (ignoring case) already exists."""


class NotFoundError(BillingError):
    """The operation targets a tenant id that does not exist."""


class BillTextError(BillingError):
    """The bill text generator failed or returned an unusable answer."""
