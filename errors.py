"""
errors.py
---------
Everything the client can fail with. All of them end the process with
exit status 1, except failures inside a single burst attempt, which are
printed and dropped by the order issuer.
"""


class ClientError(Exception):
    """Base class for every error the client reports to the user."""


class ConfigError(ClientError):
    pass


class UsageError(ClientError):
    """Bad command line; the message is the full help text."""


class OrdersError(ClientError):
    pass


class NetworkError(ClientError):
    pass


class ResponseReadError(ClientError):
    pass
