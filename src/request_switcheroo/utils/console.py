"""
Logging and Console Utilities.

All user-facing output goes through the standard ``logging`` module rendered
by ``rich``. The module-level :data:`console` is a proxy whose backend can be
swapped (for example to a recording console in tests) without invalidating
references held by other modules.
"""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

_THEME = Theme(
  {
    "logging.level.success": "green",
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "green",
    "path": "bold blue",
    "code": "bold magenta",
  }
)


class _ConsoleProxy:
  """
  Stable handle forwarding to a replaceable ``rich.console.Console``.

  Replacing the backend also re-points the root ``RichHandler`` so that
  ``logging`` output follows the console.
  """

  def __init__(self) -> None:
    self._backend: Console = Console(theme=_THEME)
    self._configure_logging()

  @property
  def backend(self) -> Console:
    """The active console."""
    return self._backend

  def set_backend(self, new_console: Console) -> None:
    """
    Routes output to another console.

    Args:
        new_console: The console to write to.
    """
    self._backend = new_console
    self._configure_logging()

  def reset(self) -> None:
    """Restores a fresh stdout console."""
    self.set_backend(Console(theme=_THEME))

  def _configure_logging(self) -> None:
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
      if isinstance(handler, RichHandler):
        root_logger.removeHandler(handler)

    handler = RichHandler(
      console=self._backend,
      show_time=False,
      show_path=False,
      markup=True,
      rich_tracebacks=True,
    )
    root_logger.setLevel(logging.INFO)
    root_logger.addHandler(handler)

  def print(self, *args: Any, **kwargs: Any) -> None:
    """Forwards to ``Console.print``."""
    self._backend.print(*args, **kwargs)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Redirects console and logging output.

  Args:
      new_console: The console to use globally.
  """
  console.set_backend(new_console)


def reset_console() -> None:
  """Resets console and logging output to stdout."""
  console.reset()


def log_info(msg: str) -> None:
  """
  Logs an informational message.

  Args:
      msg: Message text; may contain rich markup.
  """
  logging.info(f"ℹ️  {msg}", extra={"markup": True})


def log_success(msg: str) -> None:
  """
  Logs a success message at the custom SUCCESS level.

  Args:
      msg: Message text.
  """
  logging.log(SUCCESS_LEVEL_NUM, f"✅ {msg}", extra={"markup": True})


def log_warning(msg: str) -> None:
  """
  Logs a warning.

  Args:
      msg: Message text.
  """
  logging.warning(f"⚠️  {msg}", extra={"markup": True})


def log_error(msg: str) -> None:
  """
  Logs an error.

  Args:
      msg: Message text.
  """
  logging.error(f"❌ {msg}", extra={"markup": True})
