import bittensor


class GameError(Exception):
    """Base error for the game engine. Carries a machine readable ``error_type``."""

    error_type = "GAME_ERROR"

    def __init__(self, message: str, error_type: str | None = None):
        super().__init__(message)
        if error_type is not None:
            self.error_type = error_type
        bittensor.logging.error(f"[{self.error_type}] {message}")


class InvalidInput(GameError):
    """The submission was rejected before any record was created."""

    error_type = "INVALID_INPUT"


class NoMarketData(GameError):
    """Evaluation was attempted but no close exists for the evaluation date."""

    error_type = "NO_DATA"


class CollaboratorFailure(GameError):
    """The predictor or the price source failed while evaluating a game."""

    error_type = "COLLABORATOR_FAILURE"

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause
