"""
The created daemon: logs a heartbeat on the main thread while a background thread
watches for a robot to be plugged in.

SIGINT and SIGTERM set a single stop event. Each loop notices it at its own pace and exits.
"""
import logging
import os
import signal
import threading

from created.config.config import DaemonConfig, load_config
from created.heartbeat import HeartbeatLoop
from created.lifecycle import DeviceSupervisor

logger = logging.getLogger(__name__)

log_level_env = 'CREATED_LOG_LEVEL'
log_format = '%(asctime)s %(levelname)s %(name)s: %(message)s'


def configure_logging(environ=os.environ):
    """
    Logs to stderr, which ends up in the journal when run as a systemd service.
    The level is taken from $CREATED_LOG_LEVEL, INFO by default.
    """
    name = environ.get(log_level_env, 'INFO').upper()
    level = getattr(logging, name, None)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=log_format)


def install_signal_handlers(stop_event: threading.Event, signals=(signal.SIGINT, signal.SIGTERM)):
    """
    Sets the stop event when any of the given signals is received.
    :return: True if all the handlers were installed
    """
    def handler(signum, frame):
        stop_event.set()

    installed = True
    for signum in signals:
        try:
            signal.signal(signum, handler)
        except (ValueError, OSError) as e:
            logger.warning("failed to set signal handler: %s" % e)
            installed = False
    return installed


def start_daemon(config: DaemonConfig, stop_event: threading.Event):
    """
    Starts the robot supervisor in the background, then runs the heartbeat until the stop event is set.
    :return: the supervisor
    """
    logger.info("starting created daemon")
    logger.info('config: interval=%ss, message="%s"' % (config.interval, config.message))
    supervisor = DeviceSupervisor(config.serial, stop_event)
    supervisor.start()
    HeartbeatLoop(config.message, config.interval, stop_event).run()
    return supervisor


def main():
    configure_logging()
    stop_event = threading.Event()
    install_signal_handlers(stop_event)
    start_daemon(load_config(), stop_event)


if __name__ == '__main__':
    main()
