import inspect
import time
from datetime import datetime, timezone
import os

import psutil
from rich import print as _print

# Mapping of logType to symbols
LOG_TYPE_SYMBOLS = {
    'SUCCESS': ('^^^', '^^^'),
    'FAILURE': ('###', '###'),
    'STATE': ('~~~', '~~~'),
    'INFO': ('---', '---'),
    'IMPORTANT': ('===', '==='),
    'CRITICAL': ('***', '***'),
    'EXCEPTION': ('!!!', '!!!'),
    'WARNING': ('(((', ')))'),
    'DEBUG': ('[[[', ']]]'),
    'ATTEMPT': ('???', '???'),
    'STARTING': ('>>>', '>>>'),
    'PROGRESS': ('vvv', 'vvv'),
    'COMPLETED': ('<<<', '<<<'),
}

# Mapping of logType to styles
LOG_TYPE_STYLES = {
    'SUCCESS': 'green',
    'FAILURE': 'red bold',
    'STATE': 'cyan',
    'INFO': 'blue',
    'IMPORTANT': 'magenta',
    'CRITICAL': 'red bold',
    'EXCEPTION': 'red bold',
    'WARNING': 'yellow',
    'DEBUG': 'white',
    'ATTEMPT': 'cyan',
    'STARTING': 'green',
    'PROGRESS': 'blue',
    'COMPLETED': 'green',
}

# Severity of each logType; messages below the active threshold are dropped
LOG_TYPE_SEVERITY = {
    'DEBUG': 10,
    'ATTEMPT': 20,
    'STATE': 20,
    'INFO': 20,
    'PROGRESS': 20,
    'STARTING': 20,
    'SUCCESS': 20,
    'COMPLETED': 20,
    'IMPORTANT': 25,
    'WARNING': 30,
    'FAILURE': 40,
    'EXCEPTION': 40,
    'CRITICAL': 50,
}

_log_threshold = LOG_TYPE_SEVERITY['INFO']


def set_log_level(level: str) -> None:
    """
    Sets the minimum logType that Print will emit (e.g. 'DEBUG', 'WARNING').

    Raises:
        ValueError: If level is not a known logType
    """
    global _log_threshold
    level_upper = level.upper()
    if level_upper not in LOG_TYPE_SEVERITY:
        known = ', '.join(sorted(LOG_TYPE_SEVERITY))
        raise ValueError(f"Unknown log level: '{level}'. Known levels: {known}")
    _log_threshold = LOG_TYPE_SEVERITY[level_upper]


def Print(logType: str, message: str) -> None:
    """
    Prints a log message with timestamp, function name, symbols wrapping the logType, and the message.

    Unknown logTypes are always printed, without symbols or style.
    """
    try:
        logTypeUpper = logType.upper()
        if LOG_TYPE_SEVERITY.get(logTypeUpper, _log_threshold) < _log_threshold:
            return

        # Get current timestamp with microseconds
        current_time = time.time()
        timestamp = datetime.fromtimestamp(current_time, tz=timezone.utc).isoformat(timespec='microseconds') + 'Z'

        before_symbol, after_symbol = LOG_TYPE_SYMBOLS.get(logTypeUpper, ('', ''))
        formattedLogType = f"{before_symbol} {logTypeUpper} {after_symbol}"

        style = LOG_TYPE_STYLES.get(logTypeUpper, '')
        if style:
            formattedLogType = f"[{style}]{formattedLogType}[/{style}]"

        # Get the caller function name
        caller_frame = inspect.stack()[1]
        function_name = caller_frame.function

        # If the caller is Print, get the next frame
        if function_name == 'Print':
            caller_frame = inspect.stack()[2]
            function_name = caller_frame.function

        paddedFunctionName = function_name.ljust(40)

        _print(f"{timestamp} {formattedLogType} {paddedFunctionName} {message}")

    except Exception as e:
        error_message = f"Something went wrong when attempting to print.\nError: {e}"
        print(error_message)


def format_bytes(size: int) -> str:
    """Human readable size for log messages, e.g. '12.3 KB'."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 ** 2:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 ** 2):.2f} MB"


def CPU_and_Mem_usage() -> str:
    """
    Returns a string with the CPU usage and memory usage of the current process.
    """
    current_process = psutil.Process(os.getpid())
    cpu_usage = psutil.cpu_percent(interval=1)
    memory_info = current_process.memory_info()
    memory_usage_mb = memory_info.rss / (1024 ** 2)
    return f"CPU Usage: {cpu_usage}%, Process Memory Usage: {memory_usage_mb:.2f} MB"
