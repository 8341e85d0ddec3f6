#!/usr/bin/env python
"""Logging setup: rotating log files, Qt message routing and log retention."""
import logging
import logging.handlers
import os
from datetime import datetime, timedelta
from pathlib import Path

from PyQt5.QtCore import QtMsgType
import PyQt5.QtCore as QtCore

from paddycalc.infrastructure.app_constants import LOG_DIR
from paddycalc.infrastructure.settings import get_app_settings

LOG_FORMAT = '%(asctime)s [%(levelname)s] [%(module)s:%(lineno)d] [%(funcName)s] %(message)s'
MAX_RETENTION_DAYS = 365
CLEANUP_INTERVAL_MS = 24 * 60 * 60 * 1000

# (file suffix, level, max bytes, backups)
INFO_FILE = ("", logging.INFO, 5 * 1024 * 1024, 10)
ERROR_FILE = ("_error", logging.ERROR, 5 * 1024 * 1024, 10)
DEBUG_FILE = ("_debug", logging.DEBUG, 10 * 1024 * 1024, 5)

_QT_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}


def setup_logging(app_name="paddy_app", log_dir=LOG_DIR, debug_mode=False,
                  enable_info=True, enable_error=True, enable_debug=True):
    """
    Route all logging to rotating files under ``log_dir`` plus the console.

    Args:
        app_name (str): Base name of the log files
        log_dir (str): Directory receiving the log files
        debug_mode (bool): Lower the root level to DEBUG
        enable_info (bool): Write ``<app_name>.log`` (INFO and above)
        enable_error (bool): Write ``<app_name>_error.log`` (ERROR and above)
        enable_debug (bool): Write ``<app_name>_debug.log``; needs debug_mode

    Returns:
        logging.Logger: The configured root logger
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if debug_mode else logging.INFO)
    for existing in root.handlers[:]:
        root.removeHandler(existing)
        existing.close()

    formatter = logging.Formatter(LOG_FORMAT)
    wanted = [
        (enable_info, INFO_FILE),
        (enable_error, ERROR_FILE),
        (debug_mode and enable_debug, DEBUG_FILE),
    ]
    for enabled, (suffix, level, max_bytes, backups) in wanted:
        if not enabled:
            continue
        handler = logging.handlers.RotatingFileHandler(
            log_path / f"{app_name}{suffix}.log",
            maxBytes=max_bytes,
            backupCount=backups,
            encoding='utf-8',
        )
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if debug_mode else logging.WARNING)
    console.setFormatter(formatter)
    root.addHandler(console)

    root.info("Logging to %s (debug=%s)", log_path.resolve(), bool(debug_mode))
    return root


def qt_message_handler(mode, context, message):
    """Forward Qt's own diagnostics to the ``qt`` logger."""
    logging.getLogger('qt').log(_QT_LEVELS.get(mode, logging.WARNING), message)


def _is_stale(file_path, cutoff):
    return datetime.fromtimestamp(file_path.stat().st_mtime) < cutoff


def cleanup_old_logs(log_dir=LOG_DIR, max_age_days=1):
    """
    Delete log files (rotated backups included) older than ``max_age_days``.

    Returns:
        int: Number of files deleted
    """
    logger = logging.getLogger(__name__)
    if max_age_days < 1:
        logger.warning("Log retention of %s days is invalid; keeping 1 day", max_age_days)
        max_age_days = 1

    log_path = Path(log_dir)
    if not log_path.is_dir():
        logger.warning("Log directory %s not found; nothing to clean", log_dir)
        return 0

    cutoff = datetime.now() - timedelta(days=max_age_days)
    removed = 0
    for file_path in log_path.glob("*.log*"):
        if not file_path.is_file() or not _is_stale(file_path, cutoff):
            continue
        try:
            file_path.unlink()
        except OSError as exc:
            logger.warning("Could not delete %s: %s", file_path, exc)
            continue
        removed += 1
        logger.debug("Deleted stale log %s", file_path)

    logger.info("Removed %s log file(s) older than %s day(s)", removed, max_age_days)
    return removed


class LogCleanupScheduler:
    """Prune old logs now and then once a day while the app runs."""

    def __init__(self, log_dir=LOG_DIR, cleanup_days=1):
        self.log_dir = log_dir
        self.cleanup_days = max(1, min(cleanup_days, MAX_RETENTION_DAYS))
        self.timer = None
        self.logger = logging.getLogger(__name__)

    @property
    def is_running(self):
        return self.timer is not None

    def start(self):
        self.stop()
        self.timer = QtCore.QTimer()
        self.timer.timeout.connect(self.run_once)
        self.timer.start(CLEANUP_INTERVAL_MS)
        self.logger.info("Daily log cleanup enabled (%s day retention)", self.cleanup_days)
        self.run_once()

    def stop(self):
        if self.timer is None:
            return
        self.timer.stop()
        self.timer = None
        self.logger.info("Daily log cleanup stopped")

    def run_once(self):
        try:
            return cleanup_old_logs(self.log_dir, self.cleanup_days)
        except Exception as exc:
            self.logger.error("Log cleanup failed: %s", exc, exc_info=True)
            return 0


def _env_flag(name):
    value = os.environ.get(name)
    if value is None:
        return None
    return value.strip().lower() in ('true', '1', 'yes', 'on')


def get_log_config():
    """
    Resolve logging options; ``PADDY_APP_DEBUG`` and ``PADDY_APP_LOG_DIR``
    override the ``logging/*`` settings.

    Returns:
        dict: Keyword options for :func:`setup_logging` plus cleanup options
    """
    settings = get_app_settings()

    debug_mode = _env_flag('PADDY_APP_DEBUG')
    if debug_mode is None:
        debug_mode = settings.value("logging/debug_mode", False, type=bool)

    try:
        cleanup_days = int(settings.value("logging/cleanup_days", 1))
    except (TypeError, ValueError):
        cleanup_days = 1

    return {
        'debug_mode': debug_mode,
        'log_dir': os.environ.get('PADDY_APP_LOG_DIR') or LOG_DIR,
        'enable_info': settings.value("logging/enable_info", True, type=bool),
        'enable_error': settings.value("logging/enable_error", True, type=bool),
        'enable_debug': settings.value("logging/enable_debug", True, type=bool),
        'auto_cleanup': settings.value("logging/auto_cleanup", False, type=bool),
        'cleanup_days': max(1, min(cleanup_days, MAX_RETENTION_DAYS)),
    }
