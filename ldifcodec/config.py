import configparser
import os.path

from ldifcodec.insensitive import InsensitiveString

DEFAULTS = {
    "ldif": {
        "uri-enabled": "no",
    },
}

CONFIG_FILES = [
    "/etc/ldifcodec/global.cfg",
    os.path.expanduser("~/.ldifcodec/global.cfg"),
]

__config = None


def loadConfig(configFiles=None, reload=False):
    """
    Load configuration file.
    """
    global __config
    if __config is None or reload:
        x = configparser.ConfigParser()
        x.optionxform = InsensitiveString

        for section, options in DEFAULTS.items():
            x.add_section(section)
            for option, value in options.items():
                x.set(section, option, value)

        if configFiles is None:
            configFiles = CONFIG_FILES
        x.read(configFiles)
        __config = x
    return __config


def uriEnabled():
    """
    Read configuration file if necessary and return whether
    URI value-specs are resolved when reading LDIF.
    """
    cfg = loadConfig()
    return cfg.getboolean("ldif", "uri-enabled")
