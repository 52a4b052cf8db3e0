LOGGER_NAME = "Timeline_Annotator"
TICK_MS = 250
PARAM_MODE = "mode"
PARAM_DURATION = "duration"
PARAM_EVENT = "e"
EVENT_SEPARATOR = ":"
DEFAULT_DURATION = ""
DEFAULT_HOME_DIR = "~/.timeline_annotator"
CONFIG_FILENAME = "Timeline_Annotator.conf"
LOG_FILENAME = "Timeline_Annotator.log"
LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5
LOG_FORMAT = '%(asctime)s | %(name)-10s | %(levelname)-8s | %(message)s'
