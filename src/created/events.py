"""
Notifications about robots coming and going.

A DeviceSupervisor fires these events from its own thread as the devices it handles change.
Listeners are plain callables that receive the event.
"""


class EventSource:
    """ Calls each listener added with every event fired, in the order the listeners were added. """

    def __init__(self):
        self._listeners = []

    def __iadd__(self, listener):
        self._listeners.append(listener)
        return self

    def fire(self, event):
        for listener in self._listeners:
            listener(event)


class DeviceEvent:
    """ Notification about the device on a serial port. """
    def __init__(self, source, path):
        """
        :param source   The supervisor that posted this event
        :param path     The serial port path of the device
        """
        self.source = source
        self.path = path

    def __eq__(self, other):
        return type(other) is type(self) and other.__dict__ == self.__dict__

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self.path)


class DeviceHandledEvent(DeviceEvent):
    """ The command session ran to completion on the device. """


class DeviceRemovedEvent(DeviceEvent):
    """ A previously handled device is no longer present. """


class SessionFailedEvent(DeviceEvent):
    """ The command session failed. The device will be tried again on the next poll. """
    def __init__(self, source, path, error):
        super().__init__(source, path)
        self.error = error
