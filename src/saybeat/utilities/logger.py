# File: src/saybeat/utilities/logger.py
"""
Logging utilities for the SayBeat game core.
"""

import time


class LogLevel:
    """
    Log levels for categorizing log messages.
    """
    DEBUG = 0
    INFO = 1
    NOTE = 2
    WARNING = 3
    ERROR = 4

    NAMES = {
        "DEBUG": DEBUG,
        "INFO": INFO,
        "NOTE": NOTE,
        "WARNING": WARNING,
        "ERROR": ERROR,
    }

    @classmethod
    def from_name(cls, name, default=INFO):
        """Resolve a level name from config (e.g. "debug") to its value."""
        if isinstance(name, int):
            return name
        return cls.NAMES.get(str(name).upper(), default)


class GameLogger:
    """Centralized tag-based logger shared by every game component.

    Messages are routed through one class so the host can silence the
    console, raise the threshold, or mirror everything into a file without
    touching component code.
    """

    # Global Configuration
    LEVEL = LogLevel.INFO
    SOURCE = "GAME"  # Default source tag for log messages
    PRINT_TO_CONSOLE = True
    WRITE_TO_FILE = False
    LOG_FILE_PATH = "saybeat_log.txt"

    # Terminal Color Codes
    COLORS = {
        LogLevel.DEBUG: "\033[90m",    # Gray
        LogLevel.INFO: "\033[94m",     # Blue
        LogLevel.NOTE: "\033[96m",     # Cyan
        LogLevel.WARNING: "\033[93m",  # Yellow
        LogLevel.ERROR: "\033[91m",    # Red
        "RESET": "\033[0m"
    }

    LEVEL_TAGS = {
        LogLevel.DEBUG: "DBUG",
        LogLevel.INFO: "INFO",
        LogLevel.NOTE: "NOTE",
        LogLevel.WARNING: "WARN",
        LogLevel.ERROR: "!ERR"
    }

    _started = time.monotonic()

    @classmethod
    def set_level(cls, level):
        cls.LEVEL = LogLevel.from_name(level)

    @classmethod
    def set_source(cls, source):
        cls.SOURCE = source

    @classmethod
    def enable_file_logging(cls, enable=True, path=None):
        cls.WRITE_TO_FILE = enable
        if path:
            cls.LOG_FILE_PATH = path

    @classmethod
    def configure(cls, config):
        """Apply the logging keys of a loaded config dict."""
        cls.set_level(config.get("log_level", "INFO"))
        cls.enable_file_logging(
            config.get("log_to_file", False),
            config.get("log_file_path")
        )

    @classmethod
    def _get_timestamp(cls):
        """Returns fixed-width session uptime stamp."""
        return f"{time.monotonic() - cls._started:>8.3f}"

    @classmethod
    def format(cls, level, module_tag, message, source_tag=None):
        """Build a log line: [  12.345][INFO][GAME][BEAT] message"""
        if source_tag is None:
            source_tag = cls.SOURCE
        lvl_tag = cls.LEVEL_TAGS[level]
        return f"[{cls._get_timestamp()}][{lvl_tag:<4}][{source_tag:<4}][{module_tag:<4}] {message}"

    @classmethod
    def _log(cls, level, module_tag, message, source_tag=None, file_override=None):
        """Core routing method."""
        if level < cls.LEVEL:
            return

        formatted_msg = cls.format(level, module_tag, message, source_tag)

        if cls.PRINT_TO_CONSOLE:
            color = cls.COLORS[level]
            reset = cls.COLORS["RESET"]
            print(f"{color}{formatted_msg}{reset}")

        if cls.WRITE_TO_FILE or file_override:
            target_file = file_override if file_override else cls.LOG_FILE_PATH
            try:
                with open(target_file, "a", encoding="utf-8") as f:
                    f.write(formatted_msg + "\n")
            except OSError as e:
                # A read-only or missing log location must never stop the game
                if cls.PRINT_TO_CONSOLE:
                    print(f"{cls.COLORS[LogLevel.ERROR]}Logger OS Error: {e}{cls.COLORS['RESET']}")

    # Convenience Wrappers
    @classmethod
    def debug(cls, tag, msg, src=None, file=None):
        cls._log(LogLevel.DEBUG, tag, msg, source_tag=src, file_override=file)

    @classmethod
    def info(cls, tag, msg, src=None, file=None):
        cls._log(LogLevel.INFO, tag, msg, source_tag=src, file_override=file)

    @classmethod
    def note(cls, tag, msg, src=None, file=None):
        cls._log(LogLevel.NOTE, tag, msg, source_tag=src, file_override=file)

    @classmethod
    def warning(cls, tag, msg, src=None, file=None):
        cls._log(LogLevel.WARNING, tag, msg, source_tag=src, file_override=file)

    @classmethod
    def error(cls, tag, msg, src=None, file=None):
        cls._log(LogLevel.ERROR, tag, msg, source_tag=src, file_override=file)
