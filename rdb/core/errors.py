"""
Error taxonomy shared by the permission feature and its HTTP handlers.

- NotAuthorized: rendered as an empty 404 so that callers cannot tell a
  missing board from missing rights.
- ValidationFailed: field-scoped codes, rendered as {"errors": {field: [codes]}}.
- BusinessRuleViolation: non-field codes, rendered as {"errors": [codes]}.
"""
from typing import Dict, List


class RdbError(Exception):
    """Base class for errors raised by the board permission service."""


class NotAuthorized(RdbError):
    """Actor may not see the resource, or the resource does not exist."""


class ValidationFailed(RdbError):
    """One or more fields failed validation."""

    def __init__(self, field: str | None = None, code: str | None = None):
        self.errors: Dict[str, List[str]] = {}
        if field is not None and code is not None:
            self.add(field, code)
        super().__init__(self.errors)

    def add(self, field: str, code: str) -> "ValidationFailed":
        self.errors.setdefault(field, []).append(code)
        return self


class BusinessRuleViolation(RdbError):
    """A rule not tied to a single field was broken."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(code)


# Error codes
REQUIRED = "required"
ALREADY_TAKEN = "already_taken"
INVALID_ROLE = "invalid_role"
CANNOT_EDIT_OWN_PERMISSION = "cannot_edit_own_permission"
CANNOT_DELETE_OWN_PERMISSION = "cannot_delete_own_permission"
