"""
    Discovery of the serial port a robot is plugged into.

    Candidates are looked for in order of how specific they are: the configured
    path, the udev symlink installed for the robot's USB serial adapter, the
    stable by-id symlinks, and finally any USB serial device node. The first
    tier that yields a path wins.
"""

import logging
import os

from created.config.config import SerialTarget

logger = logging.getLogger(__name__)

SERIAL_DIR = '/dev/serial'
BY_ID_DIR = '/dev/serial/by-id'
DEV_DIR = '/dev'

VENDOR_PREFIX = 'by-irobot-'
USB_SERIAL_PREFIXES = ('ttyUSB', 'ttyACM')


def list_dir(directory):
    """
    Lists the names in a directory, sorted.
    A directory that is missing or unreadable has no entries.
    """
    try:
        return sorted(os.listdir(directory))
    except OSError as e:
        logger.debug("cannot list %s: %s" % (directory, e))
        return []


class DeviceLocator:
    """
    Picks at most one serial port that may host the robot.

    The locator holds no state between calls; each call to locate() looks at the
    device directories afresh.

    :param target:      the serial configuration. When it names a path that exists, that path is used.
    :param serial_dir:  directory containing the vendor udev symlinks
    :param by_id_dir:   directory containing the by-id symlinks
    :param dev_dir:     directory containing the raw device nodes
    """

    def __init__(self, target: SerialTarget, serial_dir=SERIAL_DIR, by_id_dir=BY_ID_DIR, dev_dir=DEV_DIR,
                 vendor_prefix=VENDOR_PREFIX):
        self.target = target
        self.serial_dir = serial_dir
        self.by_id_dir = by_id_dir
        self.dev_dir = dev_dir
        self.vendor_prefix = vendor_prefix

    def locate(self):
        """
        :return: the path of the best candidate port, or None if nothing plausible is attached.
        """
        for tier in (self._configured, self._vendor_link, self._by_id_link, self._usb_serial):
            path = tier()
            if path is not None:
                return path
        return None

    def _configured(self):
        path = self.target.path
        return path if path and os.path.exists(path) else None

    def _vendor_link(self):
        for name in list_dir(self.serial_dir):
            if name.startswith(self.vendor_prefix):
                path = os.path.join(self.serial_dir, name)
                if os.path.exists(path):
                    return path
        return None

    def _by_id_link(self):
        for name in list_dir(self.by_id_dir):
            path = os.path.join(self.by_id_dir, name)
            if os.path.exists(path):
                return path
        return None

    def _usb_serial(self):
        candidates = sorted(os.path.join(self.dev_dir, name) for name in list_dir(self.dev_dir)
                            if name.startswith(USB_SERIAL_PREFIXES))
        return candidates[0] if candidates else None
