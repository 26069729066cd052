"""
Loads the daemon configuration.

The configuration is a configobj file validated against the schema shipped beside this module, which
also supplies the defaults. A missing, unreadable or invalid file is never fatal: the problem is logged
and the defaults are used instead.
"""
import logging
import os
from collections import namedtuple

from configobj import ConfigObj, ConfigObjError, Section
from configobj.validate import Validator

logger = logging.getLogger(__name__)

# The default extension for configuration files
config_extension = '.cfg'
config_name = 'created'

# environment variable naming an explicit configuration file
config_env = 'CREATED_CONFIG'

DEFAULT_BAUD = 57600
DEFAULT_INTERVAL_MS = 5000
DEFAULT_MESSAGE = 'hello world'


class SerialTarget(namedtuple('SerialTarget', 'path baud')):
    """
    Where to find the robot and how fast to talk to it.
    :param path:    the serial device to use. When None, the port is auto-detected.
    :param baud:    the baud rate. When None, DEFAULT_BAUD is used.
    """
    __slots__ = ()

    def __new__(cls, path=None, baud=None):
        return super().__new__(cls, path, baud)

    @property
    def rate(self):
        return self.baud or DEFAULT_BAUD


class DaemonConfig(namedtuple('DaemonConfig', 'interval_ms message serial')):
    __slots__ = ()

    def __new__(cls, interval_ms=DEFAULT_INTERVAL_MS, message=DEFAULT_MESSAGE, serial=None):
        return super().__new__(cls, interval_ms, message, serial if serial is not None else SerialTarget())

    @property
    def interval(self):
        """ the heartbeat interval in seconds """
        return self.interval_ms / 1000


def schema_filename(directory=None):
    """
    Determines the location of the configuration schema, by default relative to this module.
    """
    directory = directory or os.path.dirname(__file__)
    return os.path.join(directory, config_name + '.schema' + config_extension)


def config_search_path(environ=os.environ):
    """
    Lists the locations a configuration file is looked for, most specific first:
    - the file named by $CREATED_CONFIG
    - $XDG_CONFIG_HOME/created/created.cfg
    - ~/.config/created/created.cfg
    - /etc/created/created.cfg
    """
    filename = config_name + config_extension
    paths = []
    explicit = environ.get(config_env)
    if explicit:
        paths.append(explicit)
    xdg = environ.get('XDG_CONFIG_HOME')
    if xdg:
        paths.append(os.path.join(xdg, config_name, filename))
    home = environ.get('HOME')
    if home:
        paths.append(os.path.join(home, '.config', config_name, filename))
    paths.append(os.path.join('/etc', config_name, filename))
    return paths


def find_config_file(environ=os.environ):
    """
    :return: the first configuration file in the search path that exists, or None.
    """
    for path in config_search_path(environ):
        if os.path.isfile(path):
            return path
    return None


def load_config_file_base(file, schema=None) -> ConfigObj:
    """
    Loads and validates a configuration file.
    :param file:    The configuration file to load. It must exist.
    :param schema:  The configspec to validate against. Defaults to the schema shipped with this package.
    :return: The validated ConfigObj instance, with defaults filled in.
    """
    try:
        config = ConfigObj(file, configspec=schema or schema_filename(), file_error=True)
    except ConfigObjError as e:
        raise type(e)(str(e) + ' at ' + file)
    validate_config(config, file)
    return config


def validate_config(config: ConfigObj, name):
    result = config.validate(Validator())
    if result is not True:
        raise ConfigObjError("the config file %s failed validation %s" % (name, result))


def config_from(conf: Section) -> DaemonConfig:
    """
    Converts a validated configuration into the immutable values used by the daemon.
    """
    serial = conf.get('serial') or {}
    return DaemonConfig(interval_ms=conf.get('interval_ms', DEFAULT_INTERVAL_MS),
                        message=conf.get('message', DEFAULT_MESSAGE),
                        serial=SerialTarget(path=serial.get('path') or None, baud=serial.get('baud')))


def load_config(file=None, environ=os.environ) -> DaemonConfig:
    """
    Loads the daemon configuration.
    :param file:    the configuration file to read. When None, the search path is used.
    :return: the configuration, or the defaults if no usable file was found.
    """
    if file is None:
        file = find_config_file(environ)
    if file is None:
        logger.warning("no config file found; using defaults")
        return DaemonConfig()
    try:
        config = config_from(load_config_file_base(file))
    except (ConfigObjError, OSError, UnicodeError) as e:
        logger.error("failed to parse config at %s: %s" % (file, e))
        return DaemonConfig()
    logger.info("loaded config from %s" % file)
    return config
