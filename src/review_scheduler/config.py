import logging

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .strategies import STRATEGIES


class Settings(BaseSettings):
    """Scheduler settings loaded from environment variables.

    環境変数（または .env）から読み込まれるスケジューラ設定。
    - default_strategy: 呼び出し側が指定しない場合の間隔戦略
    - accuracy_*: 正解率に応じた復習時刻の補正ポリシー
    - max_due_items: HTTP で返す復習対象の既定上限
    """

    environment: str = Field(
        default="development",
        description="Runtime environment / 実行環境",
    )
    default_strategy: str = Field(
        default="sm2",
        description="Interval strategy used when none is requested / 既定の間隔戦略",
    )
    maximum_interval_days: int | None = Field(
        default=None,
        ge=1,
        description="Optional cap on scheduled intervals (days) / 間隔の上限（日、未指定なら無制限）",
    )

    # --- 正解率による補正（復習対象の抽出時に適用） ---
    accuracy_low_threshold: float = Field(
        default=60.0,
        ge=0.0,
        le=100.0,
        description="Shorten intervals below this accuracy (%) / この正解率未満で間隔を短縮",
    )
    accuracy_high_threshold: float = Field(
        default=80.0,
        ge=0.0,
        le=100.0,
        description="Lengthen intervals above this accuracy (%) / この正解率超で間隔を延長",
    )
    accuracy_shorten_factor: float = Field(
        default=0.8,
        gt=0.0,
        le=1.0,
        description="Interval multiplier for weak items / 苦手項目の間隔倍率",
    )
    accuracy_lengthen_factor: float = Field(
        default=1.2,
        ge=1.0,
        description="Interval multiplier for strong items / 得意項目の間隔倍率",
    )
    accuracy_window: int = Field(
        default=5,
        ge=1,
        description="Number of recent reviews used for accuracy / 正解率の算出に使う直近レビュー数",
    )

    max_due_items: int | None = Field(
        default=None,
        ge=0,
        description="Default cap for due lists served over HTTP / 復習対象の既定上限",
    )
    log_level: str = Field(
        default="INFO",
        description="stdlib logging level / ログレベル",
    )
    host: str = Field(
        default="127.0.0.1",
        description="Bind address for `review-scheduler` / 待ち受けアドレス",
    )
    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Bind port for `review-scheduler` / 待ち受けポート",
    )

    # Pydantic v2 settings config
    # - env_file: .env を読み込む
    # - extra: 未使用キーを無視
    # - case_sensitive: 環境変数キーの大小文字を区別しない
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("default_strategy", mode="after")
    @classmethod
    def _validate_default_strategy(cls, value: str) -> str:
        name = (value or "").strip().lower()
        if name not in STRATEGIES:
            raise ValueError(
                f"DEFAULT_STRATEGY must be one of: {', '.join(STRATEGIES)}",
            )
        return name

    @field_validator("log_level", mode="after")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = (value or "").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"LOG_LEVEL must be a standard logging level, got {value!r}")
        return level

    @model_validator(mode="after")
    def _check_accuracy_thresholds(self) -> "Settings":
        if self.accuracy_low_threshold > self.accuracy_high_threshold:
            raise ValueError(
                "ACCURACY_LOW_THRESHOLD must not exceed ACCURACY_HIGH_THRESHOLD",
            )
        return self


settings = Settings()
