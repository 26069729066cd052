"""
Encodes commands for the iRobot Create Open Interface (OI).

Only the handful of opcodes needed to wake the robot, chirp a short song and
put it back to sleep are provided. Each command is a Frame - a name used for
logging and error reporting, plus the raw bytes sent over the serial port.
"""
from collections import namedtuple

START = 128
SONG = 140
PLAY = 141
POWER = 133

MAX_SONG_SLOT = 15
MAX_SONG_LENGTH = 16
MIN_PITCH = 31
MAX_PITCH = 127
MAX_DURATION = 255


class Frame(namedtuple('Frame', 'name data')):
    """ A single command as sent on the wire. The data is immutable bytes. """
    __slots__ = ()

    def __str__(self):
        return "%s %s" % (self.name, list(self.data))


Note = namedtuple('Note', 'pitch duration')
Note.__doc__ = """ A MIDI pitch and a duration in 1/64ths of a second. """


# C4, E4, G4 stored in slot 0
DEFAULT_SONG_SLOT = 0
DEFAULT_SONG = (Note(60, 16), Note(64, 16), Note(67, 24))


def _check_range(what, value, low, high):
    if not low <= value <= high:
        raise ValueError("%s %s out of range %d..%d" % (what, value, low, high))


def start() -> Frame:
    """ Starts the OI. Must be sent before any other command. """
    return Frame('start', bytes([START]))


def define_song(slot, notes) -> Frame:
    """
    Stores a song on the robot.
    :param slot:    the song slot to store the notes in
    :param notes:   iterable of (pitch, duration) pairs
    :return: the frame [140, slot, count, pitch1, duration1, ...]
    """
    notes = tuple(Note(*n) for n in notes)
    _check_range("song slot", slot, 0, MAX_SONG_SLOT)
    _check_range("song length", len(notes), 1, MAX_SONG_LENGTH)
    data = [SONG, slot, len(notes)]
    for note in notes:
        _check_range("pitch", note.pitch, MIN_PITCH, MAX_PITCH)
        _check_range("duration", note.duration, 0, MAX_DURATION)
        data.extend(note)
    return Frame('song', bytes(data))


def play_song(slot) -> Frame:
    _check_range("song slot", slot, 0, MAX_SONG_SLOT)
    return Frame('play', bytes([PLAY, slot]))


def power_down() -> Frame:
    """ Puts the robot to sleep. """
    return Frame('power', bytes([POWER]))


def session_frames(slot=DEFAULT_SONG_SLOT, notes=DEFAULT_SONG):
    """
    The frames sent each time a robot is plugged in: start, define the song, play it, power down.
    A new list is built on each call.
    """
    return [start(), define_song(slot, notes), play_song(slot), power_down()]
