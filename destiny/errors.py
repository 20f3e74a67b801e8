from __future__ import annotations


class DestinyError(Exception):
    """Base error; ``code`` is what the service reports to clients."""

    code = "DESTINY_ERROR"

    def __init__(self, msg: str) -> None:
        super().__init__(msg)
        self.msg = msg


class InvalidDrawSize(DestinyError, ValueError):
    code = "INVALID_DRAW_SIZE"

    def __init__(self, count: object) -> None:
        super().__init__(f"Draw size must be between 1 and 10, got {count!r}")
        self.count = count


class UnrankableHand(DestinyError, RuntimeError):
    code = "UNRANKABLE_HAND"


class ResultInvariantError(DestinyError, RuntimeError):
    code = "RESULT_INVARIANT"


class CatalogError(DestinyError, ValueError):
    code = "BAD_CATALOG"


class UnknownAction(DestinyError, KeyError):
    code = "UNKNOWN_ACTION"

    def __init__(self, action_id: str) -> None:
        super().__init__(f"Unknown action: {action_id}")
        self.action_id = action_id

    def __str__(self) -> str:
        return self.msg
