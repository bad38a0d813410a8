import logging
from logging.handlers import TimedRotatingFileHandler

from config import LOG_FILE, LOG_LEVEL

logger = logging.getLogger()
logger.setLevel(LOG_LEVEL)

# log structure
formatter = logging.Formatter(
    "[%(asctime)s levelname:%(levelname)s %(filename)s %(funcName)s %(lineno)d]: %(message)s")

# console log
handler = logging.StreamHandler()
handler.setFormatter(formatter)
logger.addHandler(handler)

# file log, rotate every 5 days
if LOG_FILE:
    fileHandler = TimedRotatingFileHandler(LOG_FILE, when="D", interval=5, backupCount=100, encoding="utf-8")
    fileHandler.setFormatter(formatter)
    logger.addHandler(fileHandler)
