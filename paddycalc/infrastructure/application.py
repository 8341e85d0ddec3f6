"""Startup sequence: logging, Qt application, theme, main window, event loop."""
from __future__ import annotations

import logging
import sys
import traceback
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, TYPE_CHECKING

from PyQt5.QtCore import Qt
import PyQt5.QtCore as QtCore
from PyQt5.QtWidgets import QApplication, QMessageBox

from paddycalc.infrastructure.app_constants import (
    APP_NAME,
    APP_TITLE,
    APP_VERSION,
    SETTINGS_ORG,
)
from paddycalc.infrastructure.logger import (
    LogCleanupScheduler,
    get_log_config,
    qt_message_handler,
    setup_logging,
)

if TYPE_CHECKING:
    from PyQt5.QtWidgets import QMainWindow

    MainWindowFactory = Callable[..., QMainWindow]
else:
    MainWindowFactory = Callable[..., Any]

DEFAULT_THEME = "light_teal.xml"
HIGH_DPI_ATTRIBUTES = (Qt.AA_EnableHighDpiScaling, Qt.AA_UseHighDpiPixmaps)


class StartupError(RuntimeError):
    """The main window could not be built."""


@dataclass
class ApplicationContext:
    """Everything created while starting up, released again on exit."""

    app: Optional[QApplication] = None
    logger: Optional[logging.Logger] = None
    cleanup_scheduler: Optional[LogCleanupScheduler] = None
    main_window: Optional["QMainWindow"] = None

    def shutdown(self) -> None:
        scheduler, self.cleanup_scheduler = self.cleanup_scheduler, None
        if scheduler is None:
            return
        try:
            scheduler.stop()
        except Exception as exc:
            if self.logger:
                self.logger.debug("Log cleanup scheduler did not stop cleanly: %s", exc)


class ApplicationBuilder:
    """Run the calculator; every collaborator can be swapped out for tests."""

    def __init__(
        self,
        *,
        main_window_factory: MainWindowFactory,
        log_config_getter: Callable[[], Dict[str, Any]] = get_log_config,
        logging_setup: Callable[..., logging.Logger] = setup_logging,
        qt_handler: Callable[..., None] = qt_message_handler,
        qt_attributes: Sequence[int] = HIGH_DPI_ATTRIBUTES,
        theme: Optional[str] = DEFAULT_THEME,
        app_name: str = "paddy_app",
    ) -> None:
        self._main_window_factory = main_window_factory
        self._log_config_getter = log_config_getter
        self._logging_setup = logging_setup
        self._qt_handler = qt_handler
        self._qt_attributes = tuple(qt_attributes)
        self._theme = theme
        self._app_name = app_name

    def run(self) -> int:
        """Start the application and block until it exits; returns the exit code."""
        context = ApplicationContext()
        try:
            context.logger = self._start_logging(context)
            context.app = self._start_qt(context.logger)
            context.main_window = self._main_window_factory(logger=context.logger)
            return self._exec(context)
        except StartupError as exc:
            log = context.logger or logging.getLogger(__name__)
            log.critical("Main window could not be created: %s", exc, exc_info=True)
            self._alert("Initialization Error", str(exc))
            return 1
        except Exception as exc:
            self._report_fatal(context, exc)
            return 1
        finally:
            context.shutdown()

    # ------------------------------------------------------------------
    # Startup stages
    # ------------------------------------------------------------------

    def _start_logging(self, context: ApplicationContext) -> logging.Logger:
        config = self._log_config_getter()
        logger = self._logging_setup(
            app_name=self._app_name,
            log_dir=config["log_dir"],
            debug_mode=config["debug_mode"],
            enable_info=config["enable_info"],
            enable_error=config["enable_error"],
            enable_debug=config["enable_debug"],
        )
        logger.info("%s starting", APP_TITLE)
        logger.debug("Log configuration: %s", config)
        if config.get("auto_cleanup"):
            context.cleanup_scheduler = self._start_log_cleanup(config, logger)
        return logger

    def _start_log_cleanup(
        self, config: Dict[str, Any], logger: logging.Logger
    ) -> Optional[LogCleanupScheduler]:
        try:
            scheduler = LogCleanupScheduler(
                log_dir=config["log_dir"], cleanup_days=config["cleanup_days"]
            )
            scheduler.start()
        except Exception as exc:
            logger.error("Log cleanup disabled: %s", exc, exc_info=True)
            return None
        return scheduler

    def _start_qt(self, logger: logging.Logger) -> QApplication:
        QtCore.qInstallMessageHandler(self._qt_handler)
        for attribute in self._qt_attributes:
            try:
                QApplication.setAttribute(attribute)
            except Exception as exc:
                logger.warning("Qt attribute %s rejected: %s", attribute, exc)

        app = QApplication.instance() or QApplication(sys.argv)
        app.setApplicationName(APP_NAME)
        app.setApplicationVersion(APP_VERSION)
        app.setOrganizationName(SETTINGS_ORG)
        self._apply_theme(app, logger)
        return app

    def _apply_theme(self, app: QApplication, logger: logging.Logger) -> None:
        if not self._theme:
            return
        try:
            from qt_material import apply_stylesheet
        except ImportError:
            logger.warning("qt-material is not installed; using the default Qt style.")
            return
        try:
            apply_stylesheet(app, theme=self._theme)
        except Exception as exc:
            logger.warning("Theme %s could not be applied: %s", self._theme, exc)
        else:
            logger.debug("Applied theme %s", self._theme)

    def _exec(self, context: ApplicationContext) -> int:
        if context.app is None or context.main_window is None:
            return 1
        context.main_window.show()
        exit_code = context.app.exec_()
        context.logger.info("%s exited with code %s", APP_NAME, exit_code)
        return exit_code

    # ------------------------------------------------------------------
    # Failure reporting
    # ------------------------------------------------------------------

    def _alert(self, title: str, message: str) -> None:
        try:
            QMessageBox.critical(None, title, message)
        except Exception as exc:
            logging.getLogger(__name__).debug("Could not show %r dialog: %s", title, exc)

    def _report_fatal(self, context: ApplicationContext, exc: Exception) -> None:
        if context.logger:
            context.logger.critical("Startup aborted by an unexpected error", exc_info=True)
        else:
            sys.stderr.write(f"CRITICAL ERROR: {exc}\n{traceback.format_exc()}")
        self._alert(
            "Fatal Error",
            f"{APP_NAME} hit an error it cannot recover from and will close.\n\nError: {exc}",
        )
