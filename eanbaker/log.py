"""
Logging to stderr plus an in-memory copy that can be saved later.
"""

# Standard Library
import datetime
import itertools
import json
import logging
import os
import sys
import threading

# local repo modules
import eanbaker as eb
import eanbaker.errors


ConfigError = eb.errors.ConfigError

LOGGER_NAME = "eanbaker"
# suffix that gives every MultiLogger its own logging.Logger
_LOGGER_IDS = itertools.count(1)
LEVELS_BY_NAME = {
	"error": logging.ERROR,
	"info": logging.INFO,
	"": logging.INFO,
	"default": logging.INFO,
	"debug": logging.DEBUG,
}


class SyncBuffer:
	"""
	Text buffer guarded by a lock so handlers on several threads can share it.
	"""

	def __init__(self) -> None:
		self._parts: list[str] = []
		self._lock = threading.Lock()

	def write(self, text: str) -> int:
		with self._lock:
			self._parts.append(text)
		return len(text)

	def flush(self) -> None:
		pass

	def getvalue(self) -> str:
		with self._lock:
			return "".join(self._parts)

	def reset(self) -> None:
		with self._lock:
			self._parts = []


class JSONLineFormatter(logging.Formatter):
	"""
	One JSON object per record with time, level, msg and extra fields.
	"""

	def format(self, record: logging.LogRecord) -> str:
		data = {
			"time": datetime.datetime.fromtimestamp(record.created).isoformat(),
			"level": record.levelname,
			"msg": record.getMessage(),
		}
		fields = getattr(record, "fields", None)
		if isinstance(fields, dict):
			for key, value in fields.items():
				data[key] = value
		if record.exc_info:
			data["exc_info"] = self.formatException(record.exc_info)
		return json.dumps(data, ensure_ascii=False, default=str)


class MultiLogger:
	"""
	Logger that writes JSON lines to a stream and keeps them in memory.
	"""

	def __init__(self, level: int = logging.INFO, stream=None, name: str = LOGGER_NAME) -> None:
		self.buffer = SyncBuffer()
		self.logger = logging.getLogger(f"{name}.{next(_LOGGER_IDS)}")
		self.logger.setLevel(level)
		self.logger.propagate = False

		formatter = JSONLineFormatter()
		if stream is None:
			stream = sys.stderr
		for target in (stream, self.buffer):
			handler = logging.StreamHandler(target)
			handler.setFormatter(formatter)
			self.logger.addHandler(handler)

	#============================================
	def buffer_text(self) -> str:
		return self.buffer.getvalue()

	#============================================
	def save_to_file(self, path: str) -> None:
		"""
		Write all buffered log lines to a file.

		Args:
			path: Output path.
		"""
		with open(path, "w", encoding="utf-8") as handle:
			handle.write(self.buffer.getvalue())


#============================================
def level_from_name(name: str) -> int:
	"""
	Map a LOG value to a logging level.

	Args:
		name: "error", "info", "default", "debug" or "" (any case).

	Returns:
		logging level.
	"""
	level = LEVELS_BY_NAME.get(name.strip().lower())
	if level is None:
		raise ConfigError(f"Invalid logging level '{name}'")
	return level


#============================================
def logger_from_env(stream=None) -> MultiLogger:
	"""
	Build the application logger from the LOG environment variable.

	Args:
		stream: Optional stream instead of stderr.

	Returns:
		MultiLogger.
	"""
	level = level_from_name(os.environ.get("LOG", ""))
	return MultiLogger(level, stream=stream)
