"""Gopher item types as defined by RFC 1436."""
from enum import Enum


class ItemType(str, Enum):
    """Gopher item type characters."""

    TEXT = "0"
    MENU = "1"
    CSO_ENTITY = "2"
    ERROR = "3"
    BINHEX = "4"
    DOS_FILE = "5"
    UUENCODED = "6"
    SEARCH = "7"
    TELNET = "8"
    BINARY = "9"
    MIRROR = "+"
    GIF = "g"
    TELNET_3270 = "T"
    HTML = "h"
    IMAGE = "I"
    PNG = "p"
    INFO = "i"
    SOUND = "s"
    DOCUMENT = "d"
