"""Exceptions for accounts app."""


class AuthenticationFailedError(Exception):
    """Raised when a request carries no valid bearer credential."""
