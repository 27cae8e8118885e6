import os
import logging
from pathlib import Path
from typing import Callable, Optional, TypeVar

try:
	from dotenv import load_dotenv
except ImportError:
	logging.warning("python-dotenv not available; using environment variables only")
else:
	loaded = load_dotenv()
	if not loaded and Path(".env").exists():
		raise RuntimeError(".env file present but failed to load")

T = TypeVar("T")

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _raw(name: str) -> Optional[str]:
	"""Return the variable's value, treating unset and blank the same."""
	raw = os.getenv(name)
	if raw is None or raw.strip() == "":
		return None
	return raw


def _convert(name: str, cast: Callable[[str], T], default):
	raw = _raw(name)
	if raw is None:
		return default
	try:
		return cast(raw.strip())
	except ValueError:
		logging.exception("Invalid %s: %r", name, raw)
		return default


def _to_bool(raw: str) -> bool:
	value = raw.lower()
	if value in _TRUE_VALUES:
		return True
	if value in _FALSE_VALUES:
		return False
	raise ValueError(f"expected a boolean, got {raw!r}")


def get_str_env(name: str, default: str) -> str:
	raw = _raw(name)
	return default if raw is None else raw


def get_optional_str_env(name: str) -> Optional[str]:
	return _raw(name)


def get_int_env(name: str, default: int) -> int:
	return _convert(name, int, default)


def get_optional_int_env(name: str) -> Optional[int]:
	return _convert(name, int, None)


def get_float_env(name: str, default: float) -> float:
	return _convert(name, float, default)


def get_bool_env(name: str, default: bool) -> bool:
	return _convert(name, _to_bool, default)
