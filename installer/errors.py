"""
Exceptions raised by components.

Most components report failure by returning False. An exception is used
where a step has to abort the whole run with a specific message.
"""


class SetupError(Exception):
    """Base class for errors raised during the pod setup."""


class AuthenticationError(SetupError):
    """Authentication with the source-control host failed."""
