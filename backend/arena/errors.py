HINT_NONE = 'none'
HINT_REDIRECT_HOME = 'redirectHome'
HINT_RELOAD_CLIENT = 'reloadClient'


class SessionError(Exception):
    """A rejected request. Local to one connection, never fatal."""

    message = 'Request rejected'
    hint = HINT_NONE
    surfaced = True

    def __init__(self, message=None, hint=None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        if hint:
            self.hint = hint

    def to_dict(self):
        return {'message': self.message, 'hint': self.hint}


class RoomNotFound(SessionError):
    message = 'Room not found'
    hint = HINT_REDIRECT_HOME


class RoomFull(SessionError):
    message = 'Room is full'


class NotYourTurn(SessionError):
    message = 'Not your turn'


class NotReady(SessionError):
    # benign client race; logged, never sent
    message = 'Waiting for opponent'
    surfaced = False


class SingleplayerSlotTaken(SessionError):
    message = 'Cannot join a single-player game'
