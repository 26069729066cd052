"""
Keeps a robot handled while the daemon runs.

The DeviceSupervisor polls for a device, runs one command session per newly plugged in robot
and reports what happened through its events. It runs on its own daemon thread and stops when
the shared stop event is set.
"""

import logging
import os
import threading
import time

from created.config.config import SerialTarget
from created.discovery import DeviceLocator
from created.events import DeviceHandledEvent, DeviceRemovedEvent, EventSource, SessionFailedEvent
from created.session import RobotSession, SessionError

logger = logging.getLogger(__name__)

# seconds between discovery polls
POLL_PERIOD = 2
# how long each poll waits for the stop signal
STOP_WAIT = 0.2


class DeviceSupervisor:
    """
    Watches for a robot to be plugged in and runs the command session once each time one appears.

    The supervisor remembers the last port a session succeeded on. A port that is still present and
    equal to the remembered one has already been handled and is left alone. When the remembered port
    disappears it is forgotten, so the next device to show up is handled even if it reuses the same
    path. A failed session leaves the memory as it was, so the port is tried again on the next poll.

    The polling can run on the calling thread with run(), or on a background thread with start().

    :param target:          the serial configuration
    :param stop_event:      a threading.Event that stops the polling when set. It can be shared with other loops.
    :param locator:         picks the candidate port. Defaults to a DeviceLocator for the target.
    :param session_factory: called with (port, baud) to create a session with a run() method.
    :param poll_period:     seconds to sleep between polls
    :param stop_wait:       seconds each poll waits for the stop event before polling
    """

    def __init__(self, target: SerialTarget, stop_event: threading.Event, locator=None, session_factory=RobotSession,
                 poll_period=POLL_PERIOD, stop_wait=STOP_WAIT, path_exists=os.path.exists, sleep=None, log=logger):
        self.target = target
        self.stop_event = stop_event
        self.locator = locator or DeviceLocator(target)
        self._session_factory = session_factory
        self.poll_period = poll_period
        self.stop_wait = stop_wait
        self._path_exists = path_exists
        self._sleep = sleep or time.sleep
        self.logger = log
        self.events = EventSource()
        self.last_handled = None
        self.background_thread = None

    def poll(self):
        """
        Runs one discovery iteration.
        :return: True if a session was attempted
        """
        self._forget_removed()
        port = self.locator.locate()
        if port is None or port == self.last_handled:
            return False
        self._handle(port)
        return True

    def _forget_removed(self):
        previous = self.last_handled
        if previous is not None and not self._path_exists(previous):
            self.last_handled = None
            self.logger.info("robot removed from %s" % previous)
            self.events.fire(DeviceRemovedEvent(self, previous))

    def _handle(self, port):
        try:
            self._session_factory(port, self.target.rate).run()
        except SessionError as e:
            self.logger.warning("failed to handle robot on %s: %s" % (port, e))
            self.events.fire(SessionFailedEvent(self, port, e))
            return
        self.logger.info("handled robot on %s" % port)
        self.last_handled = port
        self.events.fire(DeviceHandledEvent(self, port))

    def running(self):
        return not self.stop_event.wait(self.stop_wait)

    def run(self):
        """ Polls until the stop event is set. """
        while self.running():
            try:
                self.poll()
            except Exception as e:
                self.logger.exception("unexpected error polling for robot: %s" % e)
            self._sleep(self.poll_period)
        self.logger.info("robot worker shutdown")

    def start(self):
        """ Runs the polling on a daemon thread. """
        if self.background_thread is None:
            t = threading.Thread(target=self.run, name='robot-worker', daemon=True)
            self.background_thread = t
            t.start()

    def join(self, timeout=None):
        thread = self.background_thread
        if thread is not None:
            thread.join(timeout)
