import logging
import os
import signal
import threading
import unittest
from unittest.mock import patch

from hamcrest import assert_that, is_

from created.config.config import DaemonConfig, SerialTarget
from created.daemon import configure_logging, install_signal_handlers, main, start_daemon


class ConfigureLoggingTest(unittest.TestCase):

    @patch('created.daemon.logging.basicConfig')
    def test_default_level_is_info(self, basic_config):
        configure_logging({})
        assert_that(basic_config.call_args[1]['level'], is_(logging.INFO))

    @patch('created.daemon.logging.basicConfig')
    def test_level_from_environment(self, basic_config):
        configure_logging({'CREATED_LOG_LEVEL': 'debug'})
        assert_that(basic_config.call_args[1]['level'], is_(logging.DEBUG))

    @patch('created.daemon.logging.basicConfig')
    def test_unknown_level_is_info(self, basic_config):
        configure_logging({'CREATED_LOG_LEVEL': 'chatty'})
        assert_that(basic_config.call_args[1]['level'], is_(logging.INFO))


class SignalHandlerTest(unittest.TestCase):

    def setUp(self):
        self.previous = signal.getsignal(signal.SIGUSR1)

    def tearDown(self):
        signal.signal(signal.SIGUSR1, self.previous)

    def test_signal_sets_stop_event(self):
        stop = threading.Event()
        assert_that(install_signal_handlers(stop, (signal.SIGUSR1,)), is_(True))
        os.kill(os.getpid(), signal.SIGUSR1)
        assert_that(stop.wait(2), is_(True))

    @patch('created.daemon.signal.signal', side_effect=ValueError("signal only works in main thread"))
    def test_failure_is_a_warning(self, signal_fn):
        stop = threading.Event()
        with self.assertLogs('created.daemon', 'WARNING') as logs:
            assert_that(install_signal_handlers(stop), is_(False))
        assert_that(signal_fn.call_count, is_(2))
        assert_that(logs.output[0], is_("WARNING:created.daemon:failed to set signal handler: "
                                        "signal only works in main thread"))
        assert_that(stop.is_set(), is_(False))


class StartDaemonTest(unittest.TestCase):

    @patch('created.daemon.HeartbeatLoop')
    @patch('created.daemon.DeviceSupervisor')
    def test_supervisor_started_before_heartbeat(self, supervisor_class, heartbeat_class):
        order = []
        supervisor_class.return_value.start.side_effect = lambda: order.append('supervisor')
        heartbeat_class.return_value.run.side_effect = lambda: order.append('heartbeat')
        stop = threading.Event()
        config = DaemonConfig(1000, 'tick', SerialTarget('/dev/ttyUSB0'))

        supervisor = start_daemon(config, stop)

        assert_that(supervisor, is_(supervisor_class.return_value))
        supervisor_class.assert_called_once_with(SerialTarget('/dev/ttyUSB0'), stop)
        heartbeat_class.assert_called_once_with('tick', 1.0, stop)
        assert_that(order, is_(['supervisor', 'heartbeat']))

    @patch('created.daemon.HeartbeatLoop')
    @patch('created.daemon.DeviceSupervisor')
    def test_logs_config(self, supervisor_class, heartbeat_class):
        with self.assertLogs('created.daemon', 'INFO') as logs:
            start_daemon(DaemonConfig(), threading.Event())
        assert_that(logs.output, is_(["INFO:created.daemon:starting created daemon",
                                      'INFO:created.daemon:config: interval=5.0s, message="hello world"']))


class MainTest(unittest.TestCase):

    @patch('created.daemon.start_daemon')
    @patch('created.daemon.load_config')
    @patch('created.daemon.install_signal_handlers')
    @patch('created.daemon.configure_logging')
    def test_main_wires_one_stop_event(self, configure, install, load, start):
        main()
        configure.assert_called_once_with()
        stop = install.call_args[0][0]
        assert_that(isinstance(stop, threading.Event), is_(True))
        start.assert_called_once_with(load.return_value, stop)
