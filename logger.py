"""
Logging System for the Parquet Preview Tool

This module provides logging for preview runs with source-file context
tracking and optional file output.

Features:
- Console output on stderr, keeping stdout free for the text report
- Optional append-mode log file with full DEBUG detail
- Source file context on every file log line
- Section headers for process organization
"""

import logging
import sys
import os


class ProcessLogger:
    """
    Logging system for preview runs with source-file tracking.

    Provides structured logging with console and file output, including
    the name of the file being previewed for easy searching of log files.

    Attributes:
        source (str): Name of the file currently being previewed
        log_file (str): Path to the log file
        logger (logging.Logger): Python logger instance
    """

    def __init__(self, log_file=None, source=None, console_level=logging.WARNING):
        """
        Initialize the process logger.

        Args:
            log_file (str, optional): Path to log file. If None, only console logging.
            source (str, optional): Initial source file for context.
            console_level (int): Minimum level echoed on stderr.
        """
        self.source = source
        self.log_file = log_file
        self.console_level = console_level
        self.logger = logging.getLogger(f'preview_logger_{os.getpid()}')

        # Clear any existing handlers to avoid duplicates
        self.logger.handlers = []
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

        self._setup_formatters()
        self._setup_console_handler()
        if log_file:
            self._setup_file_handler()

    def _setup_formatters(self):
        """Setup log formatters for console and file output."""
        self.console_formatter = logging.Formatter(
            '%(asctime)s | %(levelname)-5s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        # File formatter: includes the source file for multi-run log files
        self.file_formatter = logging.Formatter(
            '%(asctime)s | %(levelname)-5s | %(source)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    def _setup_console_handler(self):
        """Setup console logging handler."""
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(self.console_level)
        console_handler.setFormatter(self.console_formatter)
        console_handler.addFilter(lambda record: getattr(record, 'console', True))
        self.logger.addHandler(console_handler)

    def _setup_file_handler(self):
        """Setup file logging handler."""
        log_dir = os.path.dirname(self.log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = logging.FileHandler(self.log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(self.file_formatter)
        self.logger.addHandler(file_handler)

    def _log(self, level, message, console=True):
        extra = {'source': self.source or 'SYSTEM', 'console': console}
        self.logger.log(level, message, extra=extra)

    def debug(self, message):
        self._log(logging.DEBUG, message)

    def info(self, message):
        self._log(logging.INFO, message)

    def warning(self, message):
        self._log(logging.WARNING, message)

    def error(self, message, console=True):
        """
        Log an error.

        Args:
            message (str): Error text
            console (bool): Also echo on stderr; False keeps it in the log file only
        """
        self._log(logging.ERROR, message, console)

    def set_source(self, source):
        """
        Update the source file used as logging context.

        Args:
            source (str): File name being previewed
        """
        self.source = source

    def section_header(self, title):
        """
        Log a section header for better process organization.

        Args:
            title (str): Section title
        """
        separator = "=" * 60
        self.info(separator)
        self.info(f" {title.upper()}")
        self.info(separator)

    def close(self):
        """Close all handlers and cleanup."""
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)


class LoggerManager:
    """
    Manager class for the global logger instance.

    Keeps a single ProcessLogger so every module logs through the same
    handlers during a run.
    """

    _instance = None

    @classmethod
    def setup(cls, log_file=None, source=None, console_level=logging.WARNING):
        """
        Setup the global logger instance.

        Returns:
            ProcessLogger: The configured logger instance
        """
        if cls._instance:
            cls._instance.close()
        cls._instance = ProcessLogger(log_file, source, console_level)
        return cls._instance

    @classmethod
    def get_logger(cls):
        return cls._instance

    @classmethod
    def close(cls):
        """Close the current logger and cleanup."""
        if cls._instance:
            cls._instance.close()
            cls._instance = None


def setup_logging(log_file=None, source=None, verbose=False):
    """
    Initialize the global logging system.

    Args:
        log_file (str, optional): Path to log file
        source (str, optional): File being previewed
        verbose (bool): Echo INFO messages on stderr as well

    Returns:
        ProcessLogger: The configured logger instance
    """
    console_level = logging.INFO if verbose else logging.WARNING
    return LoggerManager.setup(log_file, source, console_level)


def log_info(message):
    """Log info message using global logger."""
    logger = LoggerManager.get_logger()
    if logger:
        logger.info(message)


def log_warning(message):
    """Log warning message using global logger."""
    logger = LoggerManager.get_logger()
    if logger:
        logger.warning(message)
    else:
        print(f"WARNING: {message}", file=sys.stderr)


def log_error(message, console=True):
    """Log error message using global logger."""
    logger = LoggerManager.get_logger()
    if logger:
        logger.error(message, console)
    elif console:
        print(f"ERROR: {message}", file=sys.stderr)


def log_debug(message):
    """Log debug message using global logger."""
    logger = LoggerManager.get_logger()
    if logger:
        logger.debug(message)
