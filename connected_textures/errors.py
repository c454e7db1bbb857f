"""
Error types raised while building a connected-texture atlas.
"""


class ConnectedTextureError(Exception):
    """Base class for user-facing failures that abort a run."""


class InputDecodeError(ConnectedTextureError):
    pass


class InputShapeError(ConnectedTextureError, ValueError):
    pass


class SettingsMissingError(ConnectedTextureError):
    pass


class SettingsError(ConnectedTextureError, ValueError):
    pass


class OutputPathError(ConnectedTextureError):
    pass


class SeedRejectionExhaustedError(ConnectedTextureError, RuntimeError):
    def __init__(self, kind: str, attempts: int, tolerance: float):
        super().__init__(
            f"{kind} gradient sampling did not close within {tolerance} px "
            f"after {attempts} attempts; lower 'variance' or raise 'maxAttempts'"
        )
        self.kind = kind
        self.attempts = attempts
        self.tolerance = tolerance
