# Constants required for the MHINSTEK MHS-5200A dual-channel function generator

VENDOR = "MHINSTEK"

# Default link settings on the MHS-5200A: 57600/8n1
DEFAULT_BAUD_RATE = 57600

# Both timeouts are per transaction half, in seconds
SERIAL_WRITE_TIMEOUT = 0.05
SERIAL_READ_TIMEOUT = 0.05

LINE_TERMINATOR = "\n"
ACKNOWLEDGEMENT_TOKEN = "ok"

# Max. line length for requests and replies
PROTOCOL_LEN_MAX = 32

# Data replies echo the read command, e.g. ":r1f", before the value
REPLY_TAG_LENGTH = 4

CHANNELS = (1, 2)

# Read/write command tags, used as ":r{channel}{tag}" and ":s{channel}{tag}{value}"
WAVEFORM_TAG = "w"
ATTENUATION_TAG = "y"
FREQUENCY_TAG = "f"
AMPLITUDE_TAG = "a"
DUTY_CYCLE_TAG = "d"
OFFSET_TAG = "o"
PHASE_TAG = "p"

READ_MODEL_COMMAND = ":r0c"
MODEL_PREFIX = "52"

READ_OUTPUT_ENABLED_COMMAND = ":r1b"
SET_OUTPUT_ENABLED_COMMAND = ":s1b{enabled}"

SET_COUNTER_FUNCTION_COMMAND = ":s{function}m"
SET_COUNTER_GATE_TIME_COMMAND = ":s1g{gate_time}"
SET_COUNTER_ENABLED_COMMAND = ":s6b{enabled}"
READ_COUNTER_COMMAND = ":r0e"

# Amplitude and offset limits, as enforced before anything is sent
AMPLITUDE_MIN = 0
AMPLITUDE_MAX = 20
DUTY_CYCLE_MIN = 0
DUTY_CYCLE_MAX = 100
OFFSET_PERCENT_MIN = -120
OFFSET_PERCENT_MAX = 120

# Offset is sent as a percentage of amplitude, shifted so it's never negative on the wire
OFFSET_WIRE_BIAS = 120

FREQUENCY_SCALE = 100
AMPLITUDE_SCALE = 100
ATTENUATED_AMPLITUDE_SCALE = 1000
DUTY_CYCLE_SCALE = 10
