import os
import logging
import json
import threading
from logging.handlers import RotatingFileHandler
import constants


def setup_system(base_dir, level=logging.DEBUG):
    log_dir = os.path.abspath(os.path.join(base_dir, 'logs'))
    os.makedirs(log_dir, exist_ok=True)
    fmt = logging.Formatter(constants.LOG_FORMAT)
    logger = logging.getLogger(constants.LOGGER_NAME)
    logger.setLevel(level)
    f_path = os.path.join(log_dir, constants.LOG_FILENAME)
    if not any(isinstance(h, RotatingFileHandler) and h.baseFilename == f_path for h in logger.handlers):
        h = RotatingFileHandler(f_path, maxBytes=constants.LOG_MAX_BYTES,
                                backupCount=constants.LOG_BACKUP_COUNT, encoding='utf-8')
        h.setFormatter(fmt)
        logger.addHandler(h)
    return logger


class ConfigManager:

    def __init__(self, path):
        self.path = path
        self.data = {}
        self.lock = threading.Lock()
        self.logger = logging.getLogger(constants.LOGGER_NAME)
        self.load()

    def load(self):
        with self.lock:
            if os.path.exists(self.path):
                try:
                    with open(self.path, 'r', encoding='utf-8') as f: self.data = json.load(f)
                except (OSError, ValueError) as e:
                    self.logger.error(f"[CONFIG] Unreadable config at {self.path}: {e}")
                    self.data = {}
            if not isinstance(self.data, dict):
                self.logger.warning(f"[CONFIG] Ignoring non-object config at {self.path}")
                self.data = {}

    def save(self):
        with self.lock:
            os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f: json.dump(self.data, f, indent=4)

    def get(self, k, default=None): return self.data.get(k, default)

    def set(self, k, v):
        self.data[k] = v
        self.save()
