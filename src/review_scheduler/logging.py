"""Structured logging setup.

構造化ログ（JSON）の初期化を提供する。スケジューリング本体（scheduler/due/
policy/session）は I/O を持たないためログを出さず、HTTP 層のみが利用する。
"""

import logging

import structlog
from structlog import contextvars as structlog_contextvars

from .config import settings


def configure_logging(level: str | None = None) -> None:
    """Configure structlog for application-wide logging.

    標準 logging をメッセージのみのフォーマットで初期化し、structlog で
    ISO タイムスタンプ付きの JSON を出力する。``level`` 未指定時は
    ``settings.log_level`` を使う。
    """
    # "INFO:logger:" などのプレフィックスを付けず、JSON 1 行だけを出力する。
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper()),
        format="%(message)s",
        handlers=[logging.StreamHandler()],
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog_contextvars.merge_contextvars,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


logger = structlog.get_logger("review_scheduler")
