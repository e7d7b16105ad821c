import pytest


class FakeConnection:
    """ Stands in for an open serial.Serial: records writes and plays back queued reply lines.
    Once the queued replies run out, readline() behaves like a read timeout and returns b"".
    """

    def __init__(self):
        self.port = "fake"
        self.timeout = None
        self.write_timeout = None
        self.written = []
        self._replies = []

    def queue_replies(self, *lines):
        """ Queue reply lines (without terminator) to be returned by readline() in order """
        self._replies.extend(bytes(line + "\n", encoding="ascii") for line in lines)

    def write(self, data):
        self.written.append(data)
        return len(data)

    def readline(self):
        return self._replies.pop(0) if self._replies else b""

    @property
    def commands(self):
        return [data.decode("ascii").rstrip("\n") for data in self.written]


@pytest.fixture
def fake_connection():
    return FakeConnection()
