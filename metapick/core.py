# -*- coding: utf-8 -*-

from os import environ
import os.path
import logging
import logging.handlers

from . import utils

######################
# Config/Environment #
######################

FILE_DIR     = os.path.dirname(os.path.realpath(__file__))
BASE_DIR     = os.path.realpath(os.path.join(FILE_DIR, os.pardir))

CONFIG_DIR   = environ.get('METAPICK_CONFIG_DIR') or os.path.join(BASE_DIR, 'config')
DFLT_CONFIG  = ['config.yml']
CONFIG_FILES = environ.get('METAPICK_CONFIG_FILES') or DFLT_CONFIG
cfg          = utils.Config(CONFIG_FILES, CONFIG_DIR)

DEBUG        = int(environ.get('METAPICK_DEBUG') or 0)

########
# Data #
########

DATA_DIR      = 'data'

def DataFile(file_name: str, dir: str = DATA_DIR) -> str:
    """Given name of file, return full path name (in DATA_DIR, or specified
    directory)
    """
    return os.path.join(BASE_DIR, dir, file_name)

###########
# Logging #
###########

LOGGER_NAME  = environ.get('METAPICK_LOG_NAME') or 'metapick'
LOG_DIR      = 'log'
LOG_FILE     = LOGGER_NAME + '.log'
LOG_PATH     = os.path.join(BASE_DIR, LOG_DIR, LOG_FILE)
LOG_FMTR     = logging.Formatter('%(asctime)s %(levelname)s [%(filename)s:%(lineno)s]: %(message)s')
LOG_FILE_MAX = 25000000
LOG_FILE_NUM = 50

os.makedirs(os.path.dirname(LOG_PATH), exist_ok=True)
dflt_hand = logging.handlers.RotatingFileHandler(LOG_PATH, 'a', LOG_FILE_MAX, LOG_FILE_NUM)
dflt_hand.setLevel(logging.DEBUG)
dflt_hand.setFormatter(LOG_FMTR)

dbg_hand = logging.StreamHandler()
dbg_hand.setLevel(logging.DEBUG)
dbg_hand.setFormatter(LOG_FMTR)

log = logging.getLogger(LOGGER_NAME)
log.setLevel(logging.INFO)
log.addHandler(dflt_hand)
if DEBUG:
    log.setLevel(logging.DEBUG)
    if DEBUG > 1:
        log.addHandler(dbg_hand)

##############
# Exceptions #
##############

class DataError(RuntimeError):
    """Thrown if there is a problem with any of the data at runtime, whether
    due to bad external data or errrant internal processing
    """
    pass

class ParseError(DataError):
    """Pick selection string cannot be interpreted as a side of its market; the
    pick is dropped from consensus, never counted for either side
    """
    pass

class InvalidMarket(ParseError):
    """Pick market string does not map to a known `MarketType`
    """
    pass

class DataUnavailable(DataError):
    """Input feed (capper performance or pending picks) could not be read; the
    affected evaluation is skipped and reported, not treated as "no consensus"
    """
    pass

class ConfigError(RuntimeError):
    """Thrown if there is a problem with a config file entry, or combination
    of entries
    """
    pass

class LogicError(RuntimeError):
    """Basically the same as an assert, but with a `raise` interface
    """
    pass

class ImplementationError(RuntimeError):
    """Thrown if there is a problem implementing an internal interface (e.g.
    `PicksFeed` subclass)
    """
    pass
