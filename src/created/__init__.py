"""

Plug-and-play handling for an iRobot Create on a serial port.

- configuration - the heartbeat interval and message, and an optional serial port and baud rate.
    Loaded from a configobj file, falling back to defaults.
- device discovery - DeviceLocator picks at most one candidate serial port, in order of preference:
  the configured port, the robot's udev symlink, a /dev/serial/by-id symlink, then any ttyUSB/ttyACM node.
- command encoding - created.protocol.oi builds the Open Interface frames: start, define a song,
  play it, power down.
- session - RobotSession opens the port, sends the frames with a settle delay after each and closes the port.
  Failures raise SessionError naming the stage that failed.
- lifecycle - DeviceSupervisor polls discovery every couple of seconds on a background thread
  and runs a session each time a new port shows up. The last port handled is remembered so that a robot
  that stays plugged in is only handled once. It is forgotten when the port disappears.
  DeviceHandledEvent, SessionFailedEvent and DeviceRemovedEvent are fired to listeners.
- heartbeat - HeartbeatLoop logs the configured message on the main thread.


## Threading

The heartbeat runs on the main thread and the supervisor on a daemon thread. They share nothing but a
threading.Event that is set on SIGINT/SIGTERM. Each loop checks it at the top of its own iteration, so
they stop independently: the supervisor within a fraction of a second (unless a session is in progress),
the heartbeat after its current sleep.

A serial write that stalls blocks only the supervisor thread.
"""
