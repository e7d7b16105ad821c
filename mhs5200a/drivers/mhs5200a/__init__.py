"""
A driver for the MHINSTEK MHS-5200A dual-channel function generator and its built-in frequency
counter.

The generator speaks an ASCII, line-oriented protocol over USB serial (57600/8n1). Every command is
one line terminated with "\\n" and gets one reply line back:
 * reads look like ":r1f" and are answered with the command echoed, then the value: ":r1f2500000"
 * writes look like ":s1f2500000" and are answered with an empty line or "ok"

(See serial.py for framing, codec.py for how values are scaled on the wire.)
"""
from .codec import Attenuation  # noqa: F401 unused imports
from .counter import CounterFunction, GateTime, POLLING_ORDER  # noqa: F401 unused imports
from .exceptions import (  # noqa: F401 unused imports
    ProtocolError,
    ShortReply,
    TransportError,
    UnexpectedReply,
    UnsupportedDevice,
    ValidationError,
)
from .identity import DeviceIdentity  # noqa: F401 unused imports
from .session import FunctionGenerator  # noqa: F401 unused imports
from .waveforms import (  # noqa: F401 unused imports
    WaveformKind,
    list_waveforms,
    waveform_from_string,
)
