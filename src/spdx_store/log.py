"""Extensions to the standard Python logging system."""

from __future__ import annotations
from dataclasses import dataclass

import json
import logging
import re
import sys
import time
from typing import TYPE_CHECKING, ClassVar

from colorama import Fore, Style
from tqdm import tqdm

from spdx_store.config import ConfigSection

if TYPE_CHECKING:
    from typing import (
        Any,
        Optional,
        Iterator,
        Sequence,
        List,
        TypeVar,
        Tuple,
        Mapping,
    )

    T = TypeVar("T")


@dataclass
class LogConfig(ConfigSection):
    title: ClassVar[str] = "log"

    pretty: bool = True
    stream_fmt: str = "%(levelname)-8s %(message)s"
    file_fmt: str = "%(asctime)s: %(name)-24s: %(levelname)-8s %(message)s"


log_config = LogConfig.load()


# If sys.stdout is a terminal then enable "pretty" output for user
# This includes progress bars and colors
if sys.stdout.isatty():  # all: no cover
    pretty_cli = log_config.pretty
else:
    pretty_cli = False


class JSONFormatter(logging.Formatter):
    """Logging formatter for creating JSON logs.

    It will print some standard attributes defined in STD_ATTR
    plus the store specific attributes defined in _extra_attr
    """

    STD_ATTR = ["asctime", "levelname", "name", "message", "module", "exc_text"]
    _extra_attr: List[str] = ["document_uri"]

    def __init__(
        self,
        date_fmt: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ):
        """Initialize formatter with context.

        :param date_fmt: see logging module
        :param context: dict to add context information to log records
        """
        # fmt is needed for the asctime attribute to be computed
        super().__init__(fmt="%(asctime)s", datefmt=date_fmt)

        if context is None:
            context = {}
        self.context = context

    def format(self, record: logging.LogRecord) -> str:
        """Convert record into JSON."""
        super().format(record)

        json_record = {
            attr: getattr(record, attr, None)
            for attr in self.STD_ATTR + list(self._extra_attr)
        }
        json_record.update(self.context)
        json_record = {attr: val for attr, val in json_record.items() if val}

        return json.dumps(json_record)


class StoreLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter attaching the document URI to log records."""

    def process(self, msg: Any, kwargs: Any) -> Tuple[Any, Any]:
        # The default implementation replaces 'extra', keep ours instead
        return msg, kwargs

    def log(
        self,
        level: int,
        msg: Any,
        *args: Any,
        document_uri: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """Log msg, recording document_uri as a record attribute.

        :param level: see logging module
        :param args: see logging module
        :param document_uri: the SPDX document concerned by the message
        :param kwargs: other parameter supported by std logger._log method
        """
        extra = kwargs.setdefault("extra", {})
        extra["document_uri"] = document_uri
        super().log(level, msg, *args, **kwargs)

    def debug(
        self, msg: Any, *args: Any, document_uri: Optional[str] = None, **kwargs: Any
    ) -> None:
        self.log(logging.DEBUG, msg, *args, document_uri=document_uri, **kwargs)

    def info(
        self, msg: Any, *args: Any, document_uri: Optional[str] = None, **kwargs: Any
    ) -> None:
        self.log(logging.INFO, msg, *args, document_uri=document_uri, **kwargs)

    def warning(
        self, msg: Any, *args: Any, document_uri: Optional[str] = None, **kwargs: Any
    ) -> None:
        self.log(logging.WARNING, msg, *args, document_uri=document_uri, **kwargs)

    def error(
        self, msg: Any, *args: Any, document_uri: Optional[str] = None, **kwargs: Any
    ) -> None:
        self.log(logging.ERROR, msg, *args, document_uri=document_uri, **kwargs)

    def critical(
        self, msg: Any, *args: Any, document_uri: Optional[str] = None, **kwargs: Any
    ) -> None:
        self.log(logging.CRITICAL, msg, *args, document_uri=document_uri, **kwargs)


def progress_bar(it: Iterator[T] | Sequence[T], **kwargs: Any) -> Iterator[T]:
    """Create a tqdm progress bar.

    :param it: an iterator
    :param kwargs: see tqdm documentation
    :return: a tqdm progress bar iterator
    """
    if pretty_cli:  # all: no cover
        return tqdm(it, file=sys.stderr, **kwargs)
    else:
        # A disabled bar keeps the tqdm interface available to callers
        return tqdm(it, disable=True, file=sys.stderr, **kwargs)


__null_handler_set = set()


class TqdmHandler(logging.StreamHandler):  # all: no cover
    """Logging handler used when progress bars are enabled."""

    # Color the log status at the beginning of most log lines
    color_subst = (
        (re.compile(r"^(DEBUG)"), Fore.CYAN),
        (re.compile(r"^(INFO)"), Style.DIM),
        (re.compile(r"^(WARNING)"), Fore.YELLOW),
        (re.compile(r"^(ERROR)"), Fore.RED),
        (re.compile(r"^(CRITICAL)"), Fore.RED + Style.BRIGHT),
    )

    def emit(self, record: logging.LogRecord) -> None:
        msg = self.format(record)
        for reg, color in self.color_subst:
            msg = re.sub(reg, color + r"\1" + Fore.RESET + Style.RESET_ALL, msg)

        tqdm.write(msg, file=sys.stderr)


def getLogger(
    name: Optional[str] = None, prefix: str = "spdx_store"
) -> StoreLoggerAdapter:
    """Get a logger with a default handler doing nothing.

    Calling this function instead of logging.getLogger will avoid warnings
    such as::

        'No handler could be found for logger...'

    :param name: logger name, if not specified return the prefix logger
    :param prefix: application prefix, will be prepended to the name
    """
    logger = logging.getLogger(prefix if name is None else f"{prefix}.{name}")

    if prefix not in __null_handler_set:
        logging.getLogger(prefix).addHandler(logging.NullHandler())
        __null_handler_set.add(prefix)
    return StoreLoggerAdapter(logger, {})


def add_log_handlers(
    level: int,
    log_format: str,
    datefmt: Optional[str] = None,
    filename: Optional[str] = None,
    json_format: bool = False,
) -> logging.Handler:
    """Add log handlers using GMT.

    :param level: set the handler level to the specified level
    :param log_format: format string for the log handler
    :param datefmt: date/time format for the log handler
    :param filename: use a FileHandler, using the specified filename,
        instead of a StreamHandler
    :param json_format: emit one JSON object per record
    :return: the installed handler
    """
    handler: logging.StreamHandler
    fmt: logging.Formatter

    if filename is None:
        if pretty_cli:  # all: no cover
            handler = TqdmHandler()
        else:
            handler = logging.StreamHandler()
    else:
        handler = logging.FileHandler(filename)

    if json_format:
        fmt = JSONFormatter(datefmt)
    else:
        fmt = logging.Formatter(log_format, datefmt)

    fmt.converter = time.gmtime  # type: ignore
    handler.setFormatter(fmt)

    handler.setLevel(level)
    logging.getLogger("").addHandler(handler)
    return handler


def activate(
    stream_format: str = log_config.stream_fmt,
    file_format: str = log_config.file_fmt,
    datefmt: Optional[str] = None,
    level: int = logging.INFO,
    filename: Optional[str] = None,
    store_debug: bool = False,
    json_format: bool = False,
) -> None:
    """Activate default spdx_store logging.

    :param level: set the console handler to the specified level
    :param datefmt: date/time format for the log handler
    :param stream_format: format string for the stream handler
    :param file_format: format string for the file handler
    :param filename: redirect logs to a file in addition to the StreamHandler
    :param store_debug: activate full debug of the spdx_store library
    :param json_format: emit JSON records
    """
    # What is effectively logged is decided by the handlers levels
    logging.getLogger("").setLevel(logging.DEBUG)

    add_log_handlers(
        level=level, log_format=stream_format, datefmt=datefmt, json_format=json_format
    )

    if filename is not None:
        add_log_handlers(
            level=min(level, logging.DEBUG),
            log_format=file_format,
            datefmt=datefmt,
            filename=filename,
            json_format=json_format,
        )

    if store_debug:
        store_debug_logger.setLevel(logging.DEBUG)


# Full debug information of the store internals (lock and counter
# handling), disabled unless activate() is called with store_debug=True
store_debug_logger = getLogger("debug")
store_debug_logger.setLevel(logging.CRITICAL + 1)

debug = store_debug_logger.debug
