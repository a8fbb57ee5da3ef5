import os

from src import shared


class Config:
    DEFAULT_PORT = 8080

    @staticmethod
    def get_port() -> int:
        raw_value = os.getenv("PORT", "").strip()
        return int(raw_value) if raw_value.isdigit() else Config.DEFAULT_PORT

    @staticmethod
    def get_cors_origins() -> list[str]:
        return shared.build_cors_origins()

    @staticmethod
    def debug_enabled() -> bool:
        return os.getenv("BOARDSYNC_DEBUG", "false").lower() == "true"
