import logging
import sys
import json
import inspect
import datetime
from pathlib import Path
from functools import wraps
import traceback

# Log files live next to this module
log_dir = Path(__file__).parent
log_dir.mkdir(exist_ok=True)

# ANSI colours for console output
BLUE = '\033[94m'
GREEN = '\033[92m'
YELLOW = '\033[93m'
RED = '\033[91m'
PURPLE = '\033[95m'
CYAN = '\033[96m'
BOLD = '\033[1m'
END = '\033[0m'

# Headers whose values carry credentials
MASKED_HEADERS = {"cookie", "set-cookie", "authorization"}


def format_object(obj):
    if hasattr(obj, '__dict__'):
        return str(obj.__dict__)
    if isinstance(obj, (list, dict, tuple, set)):
        try:
            return json.dumps(obj, indent=2, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            return str(obj)
    return str(obj)


def mask_headers(headers):
    return {
        key: ("***" if key.lower() in MASKED_HEADERS else value)
        for key, value in headers.items()
    }


class DebugLogger:
    """Verbose debug logger with caller information and coloured output"""

    def __init__(self, name="debug", level=logging.DEBUG):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.logger.propagate = False

        if self.logger.handlers:
            self.logger.handlers.clear()

        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
        )

        file_handler = logging.FileHandler(log_dir / "debug.log", encoding='utf-8')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(level)

        self.logger.addHandler(file_handler)
        self.logger.addHandler(console_handler)

    def debug(self, message, *args, **kwargs):
        """Debug record prefixed with the calling file, line and function"""
        frame = inspect.currentframe().f_back
        filename = frame.f_code.co_filename
        lineno = frame.f_lineno
        function = frame.f_code.co_name

        # Keep the path relative to the package
        marker = filename.find("sprintboard")
        if marker != -1:
            filename = filename[marker:]

        caller_info = f"{BLUE}[{filename}:{lineno} - {function}]{END}"
        self.logger.debug(f"{caller_info} {message}", *args, **kwargs)

    def info(self, message, *args, **kwargs):
        self.logger.info(f"{GREEN}{message}{END}", *args, **kwargs)

    def warning(self, message, *args, **kwargs):
        self.logger.warning(f"{YELLOW}{message}{END}", *args, **kwargs)

    def error(self, message, *args, **kwargs):
        """Error record, with the active traceback appended if there is one"""
        trace = traceback.format_exc()
        if trace and trace != 'NoneType: None\n':
            message = f"{message}\n{RED}Traceback:{END}\n{trace}"
        self.logger.error(f"{RED}{message}{END}", *args, **kwargs)

    def start_func(self, func_name=None, params=None):
        if not func_name:
            frame = inspect.currentframe().f_back
            func_name = frame.f_code.co_name

        params_str = ""
        if params:
            params_str = f" with params: {format_object(params)}"

        self.debug(f"{PURPLE}Entering {func_name}{END}{params_str}")

    def end_func(self, func_name=None, result=None, execution_time=None):
        if not func_name:
            frame = inspect.currentframe().f_back
            func_name = frame.f_code.co_name

        result_str = ""
        if result is not None:
            formatted = format_object(result)
            # Large results are truncated
            result_str = f", result: {formatted[:1000]}"
            if len(formatted) > 1000:
                result_str += "... [truncated]"

        time_str = ""
        if execution_time:
            time_str = f", took {execution_time:.4f}s"

        self.debug(f"{PURPLE}Leaving {func_name}{END}{result_str}{time_str}")

    def log_exception(self, message="Unhandled exception"):
        exc_type, exc_value, exc_traceback = sys.exc_info()
        if exc_type:
            tb_str = ''.join(traceback.format_exception(exc_type, exc_value, exc_traceback))
            self.logger.error(f"{RED}{message}: {exc_type.__name__}: {exc_value}\n{tb_str}{END}")
        else:
            self.error(message)

    def log_request(self, request, extra_info=None):
        method = getattr(request, 'method', 'UNKNOWN')
        url = str(getattr(request, 'url', 'UNKNOWN'))
        client = getattr(request, 'client', None)
        client_host = client.host if client else "unknown"
        headers = mask_headers(dict(getattr(request, 'headers', {})))

        info = (
            f"{CYAN}HTTP request:{END} {method} {url}\n"
            f"{CYAN}Client:{END} {client_host}\n"
            f"{CYAN}Headers:{END} {json.dumps(headers, indent=2, ensure_ascii=False)}"
        )

        if extra_info:
            info += f"\n{CYAN}Extra:{END} {extra_info}"

        self.debug(info)

    def log_response(self, response, process_time=None):
        status_code = getattr(response, 'status_code', 0)
        headers = mask_headers(dict(getattr(response, 'headers', {})))

        color = GREEN if 200 <= status_code < 400 else YELLOW if 400 <= status_code < 500 else RED

        info = (
            f"{CYAN}HTTP response:{END} {color}Status {status_code}{END}\n"
            f"{CYAN}Headers:{END} {json.dumps(headers, indent=2, ensure_ascii=False)}"
        )

        if process_time is not None:
            info += f"\n{CYAN}Processing time:{END} {process_time:.3f}s"

        self.debug(info)

    def log_data(self, name, data):
        self.debug(f"{CYAN}{name}:{END}\n{format_object(data)}")


def log_function(logger=None):
    """Decorator logging arguments, result and timing of sync or async functions"""
    def decorator(func):
        def _call_args(args, kwargs):
            func_args = {}
            func_args.update(zip(inspect.getfullargspec(func).args, args))
            func_args.update(kwargs)
            # Sessions and bound instances only add noise
            for noisy in ("self", "cls", "db"):
                func_args.pop(noisy, None)
            return func_args

        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                active = logger or debug_logger
                start_time = datetime.datetime.now()
                active.start_func(func.__name__, _call_args(args, kwargs))
                try:
                    result = await func(*args, **kwargs)
                except Exception:
                    active.log_exception(f"Error in {func.__name__}")
                    raise
                execution_time = (datetime.datetime.now() - start_time).total_seconds()
                active.end_func(func.__name__, result, execution_time)
                return result

            return async_wrapper

        @wraps(func)
        def wrapper(*args, **kwargs):
            active = logger or debug_logger
            start_time = datetime.datetime.now()
            active.start_func(func.__name__, _call_args(args, kwargs))
            try:
                result = func(*args, **kwargs)
            except Exception:
                active.log_exception(f"Error in {func.__name__}")
                raise
            execution_time = (datetime.datetime.now() - start_time).total_seconds()
            active.end_func(func.__name__, result, execution_time)
            return result

        return wrapper

    return decorator


debug_logger = DebugLogger()
