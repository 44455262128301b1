import os

# Basic settings helper to read environment configuration.


def _as_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


def _as_float(val: str | None, default: float) -> float:
    if val is None or not val.strip():
        return default
    try:
        return float(val)
    except ValueError:
        return default


class Settings:
    def __init__(self) -> None:
        self.PREDICTOR_ENABLED: bool = _as_bool(os.getenv("PREDICTOR_ENABLED"), False)
        self.PREDICTOR_TIMEOUT_SECONDS: float = _as_float(os.getenv("PREDICTOR_TIMEOUT_SECONDS"), 5.0)
        self.PREDICTOR_RESULT_LIMIT: int = int(_as_float(os.getenv("PREDICTOR_RESULT_LIMIT"), 5))
        self.BLUR_HIDE_DELAY_MS: float = _as_float(os.getenv("BLUR_HIDE_DELAY_MS"), 200.0)
        self.FRAME_INTERVAL_MS: float = _as_float(os.getenv("FRAME_INTERVAL_MS"), 1000.0 / 60.0)


settings = Settings()
