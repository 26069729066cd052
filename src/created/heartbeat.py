import logging
import threading
import time

logger = logging.getLogger(__name__)


class HeartbeatLoop:
    """
    Logs a message at a fixed interval until the stop event is set.

    The stop event is only checked between sleeps, so stopping can take up to one interval.

    :param message:     the message to log
    :param interval:    seconds between messages
    :param stop_event:  a threading.Event, shared with the other loops of the daemon
    """

    def __init__(self, message, interval, stop_event: threading.Event, sleep=None, log=logger):
        self.message = message
        self.interval = interval
        self.stop_event = stop_event
        self._sleep = sleep or time.sleep
        self.logger = log

    def run(self):
        while not self.stop_event.is_set():
            self.logger.info(self.message)
            self._sleep(self.interval)
        self.logger.info("shutdown signal received; exiting")
