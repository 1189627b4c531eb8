import os
import logging
import codecs
from pathlib import Path
from typing import Optional

try:
	from dotenv import load_dotenv
except ImportError:
	logging.warning("python-dotenv not available; using environment variables only")
else:
	loaded = load_dotenv()
	if not loaded and Path(".env").exists():
		raise RuntimeError(".env file present but failed to load")


def get_str_env(name: str, default: str) -> str:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	return raw


def get_optional_str_env(name: str) -> Optional[str]:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return None
	return raw


def get_int_env(name: str, default: int) -> int:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	try:
		return int(raw)
	except ValueError:
		logging.exception("Invalid %s: %r", name, raw)
		return default


def get_optional_int_env(name: str) -> Optional[int]:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return None
	try:
		return int(raw)
	except ValueError:
		logging.exception("Invalid %s: %r", name, raw)
		return None


def get_float_env(name: str, default: float) -> float:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	try:
		return float(raw)
	except ValueError:
		logging.exception("Invalid %s: %r", name, raw)
		return default


def get_bool_env(name: str, default: bool) -> bool:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	return raw.strip().lower() in ("1", "true", "yes", "on")


def get_delimiter_env(name: str, default: str) -> str:
	"""Read a chunk delimiter, decoding escapes so `\\n\\n` in .env means two newlines."""
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	return codecs.decode(raw, "unicode_escape")


DATABASE_URL = get_optional_str_env("DATABASE_URL")
USER_AGENT = get_str_env("USER_AGENT", "DocSync/0.1")
LOG_LEVEL = get_str_env("LOG_LEVEL", "INFO").upper()


def configs_dir() -> str:
	return get_str_env("DOCSYNC_CONFIGS_DIR", os.path.join(os.getcwd(), "configs"))
