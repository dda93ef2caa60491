class ReactGamesError(Exception):
    pass


class SessionFileError(ReactGamesError):
    pass


class UnknownGameError(ReactGamesError):
    pass


__all__ = ["ReactGamesError", "SessionFileError", "UnknownGameError"]
