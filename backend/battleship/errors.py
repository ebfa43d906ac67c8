"""Request-level errors.

Every error raised by the game services derives from ``GameError`` and is
reported back to the originating connection only, as an
``{error: true, errorText}`` payload under the request's message type.
"""


class GameError(Exception):
    error_text = 'Request failed'

    def __init__(self, error_text=None):
        if error_text is not None:
            self.error_text = error_text
        super().__init__(self.error_text)

    def to_dict(self):
        return {'error': True, 'errorText': self.error_text}


# ---- Taxonomy ----

class NotFoundError(GameError):
    error_text = 'Not found'


class InvalidStateError(GameError):
    error_text = 'Invalid state for this request'


class InvalidInputError(GameError):
    error_text = 'Invalid input'


class ConflictError(GameError):
    error_text = 'Conflicting request'


class AuthError(GameError):
    error_text = 'Authentication failed'


# ---- Player directory ----

class IncorrectCredentials(AuthError):
    error_text = 'Incorrect password'


class InvalidCredentialsFormat(InvalidInputError):
    error_text = 'Name and password are required'


class NotRegistered(InvalidStateError):
    error_text = 'Player not registered'


# ---- Rooms ----

class RoomNotFound(NotFoundError):
    error_text = 'Room not found'


class RoomFull(ConflictError):
    error_text = 'Room is full'


class AlreadyInRoom(ConflictError):
    error_text = 'Player already in a room'


class AlreadyInAnotherRoom(ConflictError):
    error_text = 'Player already in another room'


# ---- Games ----

class GameNotFound(NotFoundError):
    error_text = 'Game not found'


class PlayerNotInGame(NotFoundError):
    error_text = 'Player not found in the game'


class GameAlreadyStarted(InvalidStateError):
    error_text = 'Ships can only be placed before the game starts'


class InvalidFleet(InvalidInputError):
    error_text = 'Invalid ships configuration'


class NotPlaying(InvalidStateError):
    error_text = 'Game is not in playing state'


class NotYourTurn(ConflictError):
    error_text = 'Not your turn'


class OutOfBounds(InvalidInputError):
    error_text = 'Invalid coordinates'


class AlreadyAttacked(ConflictError):
    error_text = 'Cell already attacked'


class NoAvailableCells(InvalidStateError):
    error_text = 'No available cells to attack'
