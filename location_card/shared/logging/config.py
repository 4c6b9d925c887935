"""ロギング設定"""
import logging
import sys

from ..utils.text import mask_access_token

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# WARNING 以上のみ出力するサードパーティのロガー
QUIET_LOGGERS = ("urllib3", "uvicorn.access")

_logger_configured = False


class AccessTokenFilter(logging.Filter):
    """ログメッセージ中の access_token の値を伏せるフィルター"""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = mask_access_token(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def _console_handler(level: int) -> logging.Handler:
    """標準出力へのハンドラー（APIキーは必ずマスクする）"""
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler.addFilter(AccessTokenFilter())
    return handler


def setup_logging(level: str = "INFO") -> None:
    """
    ロギングを設定（2回目以降の呼び出しは何もしない）

    Args:
        level: ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    global _logger_configured

    if _logger_configured:
        return

    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(_console_handler(log_level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _logger_configured = True
    logging.info(f"Logging configured with level: {level}")


def get_logger(name: str) -> logging.Logger:
    """
    指定名のロガーを取得

    Args:
        name: ロガー名（通常は__name__を指定）
    """
    return logging.getLogger(name)
