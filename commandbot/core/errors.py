"""Error taxonomy shared by the dispatcher and its collaborators."""


class CommandBotError(Exception):
    """Base class for every error raised inside commandbot."""


class ConfigurationError(CommandBotError):
    """A required setting is missing. The process must not start."""


class BackendUnavailable(CommandBotError):
    """Transport failure or non-2xx answer from one of the HTTP backends."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class ValidationError(CommandBotError):
    """A command is missing a required argument.

    The message is the usage hint shown to the user.
    """


class PersistenceError(CommandBotError):
    """Usage store read or write failed."""
