"""
Runs the command session against a robot on a serial port.

A session opens the port, sends each frame from created.protocol.oi in turn and waits after
each one for the robot to act on it. The port is closed when the session ends, whether it
succeeded or not. Nothing is retried here; a failed session is simply tried again on the
next discovery poll.
"""

import logging
import termios
import time
from collections import namedtuple

import serial
from serial import SerialException

from created.protocol import oi

logger = logging.getLogger(__name__)

# seconds to wait for the port to respond
RESPONSE_TIMEOUT = 0.5

# the OI needs a moment after start before it accepts commands
START_SETTLE = 0.05
SONG_SETTLE = 0.02
# long enough for the default song to finish before powering down
PLAY_DURATION = 1.5

# errors raised by pyserial while writing or draining the port
WRITE_ERRORS = (SerialException, OSError, termios.error)


class SessionTiming(namedtuple('SessionTiming', 'start song play power')):
    """ The delay in seconds after sending each frame, keyed by frame name. """
    __slots__ = ()

    def delay_after(self, frame: oi.Frame):
        return self._asdict().get(frame.name, 0)


DEFAULT_TIMING = SessionTiming(start=START_SETTLE, song=SONG_SETTLE, play=PLAY_DURATION, power=0)
NO_DELAY = SessionTiming(0, 0, 0, 0)


class SessionError(Exception):
    """ Indicates the session could not be completed.

    :param stage:   'open' if the port could not be opened, otherwise the name of the frame being sent.
    :param reason:  what went wrong
    """
    def __init__(self, stage, reason):
        super().__init__(stage, reason)
        self.stage = stage
        self.reason = reason

    def __str__(self):
        return "%s: %s" % (self.stage, self.reason)


class RobotSession:
    """
    One attempt to run the command frames over a freshly opened serial port.

    :param port:            the serial device path
    :param baud:            the baud rate
    :param frames:          the frames to send. Defaults to a new oi.session_frames().
    :param timing:          the delays after each frame
    :param serial_factory:  opens the port. Called with the port, baud and timeout keyword.
    :param sleep:           used to wait between frames
    """

    def __init__(self, port, baud, frames=None, timing=DEFAULT_TIMING, timeout=RESPONSE_TIMEOUT,
                 serial_factory=None, sleep=None, log=logger):
        self.port = port
        self.baud = baud
        self.frames = frames if frames is not None else oi.session_frames()
        self.timing = timing
        self.timeout = timeout
        self._serial_factory = serial_factory or serial.Serial
        self._sleep = sleep or time.sleep
        self.logger = log

    def run(self):
        """
        Opens the port and sends all the frames.
        Raises SessionError at the first failure; frames after the failing one are not sent.
        """
        self.logger.info("connecting to %s at %d baud" % (self.port, self.baud))
        ser = self._open()
        try:
            for frame in self.frames:
                self._send(ser, frame)
                delay = self.timing.delay_after(frame)
                if delay > 0:
                    self._sleep(delay)
        finally:
            self._close(ser)

    def _close(self, ser):
        """ releases the port. A failure here does not change the outcome of the session. """
        try:
            ser.close()
        except WRITE_ERRORS as e:
            self.logger.warning("error closing %s: %s" % (self.port, e))

    def _open(self):
        try:
            return self._serial_factory(self.port, self.baud, timeout=self.timeout)
        except (SerialException, OSError, ValueError) as e:
            raise SessionError('open', "open serial: %s" % e) from e

    def _send(self, ser, frame: oi.Frame):
        """ writes the whole frame and drains it to the device """
        data = frame.data
        try:
            written = ser.write(data)
        except WRITE_ERRORS as e:
            raise SessionError(frame.name, "write: %s" % e) from e
        if written is not None and written != len(data):
            raise SessionError(frame.name, "write: short write of %d/%d bytes" % (written, len(data)))
        try:
            ser.flush()
        except WRITE_ERRORS as e:
            raise SessionError(frame.name, "flush: %s" % e) from e
        self.logger.debug("sent %s" % frame)


def run_session(port, baud):
    """ Runs the default command session on the given port. """
    RobotSession(port, baud).run()
