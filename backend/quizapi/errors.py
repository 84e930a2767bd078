"""Error types raised by the leaderboard and relay components.

Every ``ApiError`` carries the message shown to the caller and the HTTP
status it maps to; ``create_app`` turns them into ``{"error": message}``
responses. Backend and upstream detail goes to the log, never into
``message``.
"""


class ApiError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'error': self.message}


class ConfigurationError(ApiError):
    """A required credential is missing from the environment."""
    status_code = 500


class InvalidInput(ApiError):
    status_code = 400


class StorageError(ApiError):
    """The database call failed."""
    status_code = 500


class UpstreamError(ApiError):
    """The external API answered with an error or could not be reached."""
    status_code = 500


class NonFatalAssociationError(Exception):
    """Recording achievements failed after the score itself was saved."""

    def __init__(self, player_name, achievement_ids, cause=None):
        super().__init__(f"failed to record achievements for {player_name!r}: {cause}")
        self.player_name = player_name
        self.achievement_ids = list(achievement_ids)
        self.cause = cause
