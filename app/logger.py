import logging
import json
import os
from pathlib import Path
import threading


ROOT_LOGGER_NAME = "ledger"


class SingletonLogger:
    """
    Singleton that owns the handlers of the "ledger" logger tree.

    Module loggers ("ledger.inventory", "ledger.ledger", ...) are plain
    children of the root logger and propagate to the handlers configured here.
    """
    _instance = None
    _lock = threading.Lock()
    _logger = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(SingletonLogger, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            with self._lock:
                if not self._initialized:
                    self._logger = None
                    self._initialized = True

    def get_logger(self, name: str = ROOT_LOGGER_NAME) -> logging.Logger:
        """
        Get a logger in the ledger tree, creating the root handlers on first use.

        Args:
            name (str): Dotted logger name, e.g. "ledger.inventory"

        Returns:
            logging.Logger: The named logger
        """
        if self._logger is None:
            with self._lock:
                if self._logger is None:
                    self._logger = self._create_logger(
                        level=os.environ.get('LOG_LEVEL', 'INFO'),
                        log_dir=os.environ.get('LOG_DIR') or None,
                    )
        if name == ROOT_LOGGER_NAME:
            return self._logger
        if not name.startswith(ROOT_LOGGER_NAME + "."):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        return logging.getLogger(name)

    def configure(self, level: str = "INFO", log_dir: str = None) -> logging.Logger:
        """Rebuild the root handlers with a new level and log directory."""
        with self._lock:
            self._logger = self._create_logger(level=level, log_dir=log_dir)
        return self._logger

    def _create_logger(self, level: str = "INFO", log_dir: str = None) -> logging.Logger:
        """
        Create the root logger with console and optional file handlers.

        Returns:
            logging.Logger: Configured logger instance
        """
        logger = logging.getLogger(ROOT_LOGGER_NAME)
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        logger.propagate = False

        # Clear any existing handlers
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

        formatter = JsonFormatter({
            "timestamp": "asctime",
            "level": "levelname",
            "logger": "name",
            "module": "module",
            "function": "funcName",
            "line": "lineno",
            "message": "message"
        })

        if log_dir:
            logs_dir = Path(log_dir)
            logs_dir.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(logs_dir / "ledger.log", mode='a', encoding='utf-8')
            file_handler.setLevel(logging.INFO)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

            error_file_handler = logging.FileHandler(logs_dir / "errors.log", mode='a', encoding='utf-8')
            error_file_handler.setLevel(logging.ERROR)
            error_file_handler.setFormatter(formatter)
            logger.addHandler(error_file_handler)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        return logger


class JsonFormatter(logging.Formatter):
    """
    Formatter that outputs JSON strings after parsing the LogRecord.

    @param dict fmt_dict: Key: logging format attribute pairs. Defaults to {"message": "message"}.
    @param str time_format: time.strftime() format string. Default: "%Y-%m-%dT%H:%M:%S"
    @param str msec_format: Microsecond formatting. Appended at the end. Default: "%s.%03dZ"
    """
    def __init__(self, fmt_dict: dict = None, time_format: str = "%Y-%m-%dT%H:%M:%S", msec_format: str = "%s.%03dZ"):
        super().__init__()
        self.fmt_dict = fmt_dict if fmt_dict is not None else {"message": "message"}
        self.default_time_format = time_format
        self.default_msec_format = msec_format
        self.datefmt = None

    def usesTime(self) -> bool:
        return "asctime" in self.fmt_dict.values()

    def formatMessage(self, record) -> dict:
        """
        Return a dictionary of the relevant LogRecord attributes instead of a string.
        KeyError is raised if an unknown attribute is provided in the fmt_dict.
        """
        return {fmt_key: record.__dict__[fmt_val] for fmt_key, fmt_val in self.fmt_dict.items()}

    def format(self, record) -> str:
        record.message = record.getMessage()

        if self.usesTime():
            record.asctime = self.formatTime(record, self.datefmt)

        message_dict = self.formatMessage(record)

        if record.exc_info:
            # Cache the traceback text, it's constant
            if not record.exc_text:
                record.exc_text = self.formatException(record.exc_info)

        if record.exc_text:
            message_dict["exc_info"] = record.exc_text

        if record.stack_info:
            message_dict["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(message_dict, default=str)


def configure_logging(level: str = "INFO", log_dir: str = None) -> logging.Logger:
    """
    Reconfigure the ledger logger tree.

    Called by create_app() once the Flask config is known.
    """
    return SingletonLogger().configure(level=level, log_dir=log_dir)


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger in the ledger tree.

    Args:
        name (str): Logger name; names outside the tree are nested under "ledger"

    Returns:
        logging.Logger: The named logger
    """
    return SingletonLogger().get_logger(name)
