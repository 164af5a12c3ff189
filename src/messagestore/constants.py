"""Constants for message storage backends."""

MESSAGE_FILE_SUFFIX = ".txt"
DEFAULT_ENCODING = "utf-8"

SQLITE_FILENAME = "messages.db"
SQLITE_TABLE = "messages"
SQLITE_MAX_ROWID = 2**63 - 1  # signed 64-bit INTEGER PRIMARY KEY

HTTP_MESSAGES_PATH = "/messages"
