import logging
import logging.handlers
import sys
import traceback
from pathlib import Path
from types import TracebackType

from push_dispatch.config import Settings

LOG_LINE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
LOG_FILE_NAME = "push_dispatch.log"


class TruncatedFormatter(logging.Formatter):
  """Formatter that truncates the stack trace to the last few lines."""

  # ruff: noqa: N802
  def formatException(self, ei: tuple[type[BaseException] | None, BaseException | None, TracebackType | None]) -> str:
    lines = traceback.format_exception(*ei)
    # Keep header + last 5 lines of traceback
    if len(lines) > 6:
      return "".join(lines[:1] + ["    ...\n"] + lines[-5:])
    return "".join(lines)


def _build_handlers(settings: Settings) -> list[logging.Handler]:
  stream = logging.StreamHandler(sys.stdout)
  stream.setFormatter(TruncatedFormatter(LOG_LINE_FORMAT, datefmt=LOG_DATE_FORMAT))
  handlers: list[logging.Handler] = [stream]

  if settings.log_dir:
    log_dir = Path(settings.log_dir)
    try:
      log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
      raise RuntimeError(f"Failed to create log directory at {log_dir}: {exc}") from exc

    file_handler = logging.handlers.RotatingFileHandler(log_dir / LOG_FILE_NAME, encoding="utf-8", maxBytes=settings.log_max_bytes, backupCount=settings.log_backup_count)
    file_handler.setFormatter(logging.Formatter(LOG_LINE_FORMAT, datefmt=LOG_DATE_FORMAT))
    handlers.append(file_handler)

  return handlers


def setup_logging(settings: Settings) -> logging.Logger:
  """Install stdout (and optional rotating file) handlers on the root logger."""
  handlers = _build_handlers(settings)
  logging.basicConfig(level=settings.log_level, handlers=handlers, force=True)
  # botocore logs every request at DEBUG; keep it at WARNING unless explicitly raised.
  for noisy in ("botocore", "boto3", "urllib3"):
    logging.getLogger(noisy).setLevel(max(logging.WARNING, logging.getLogger().level))

  logger = logging.getLogger("push_dispatch")
  logger.info("Logging initialized level=%s file_logging=%s", settings.log_level, bool(settings.log_dir))
  return logger
