class TransportError(Exception):
    # Error class used when a write or read fails or times out. The serial port can't tell these apart
    pass


class ProtocolError(Exception):
    # Base error class used when the generator's reply isn't shaped the way the command expects
    pass


class UnexpectedReply(ProtocolError):
    # Error class used when we get data instead of an acknowledgement (or vice versa), or a reply we can't parse
    pass


class ShortReply(ProtocolError):
    # Error class used when a data reply is too short to hold anything beyond its echoed command tag
    pass


class ValidationError(ValueError):
    # Error class used when a requested value is out of range. Raised before anything is sent
    pass


class UnsupportedDevice(ValueError):
    # Error class used when the model code doesn't belong to the MHS-5200 family
    pass
