"""Program-wide settings shared by recording, cutting and the user interface.

All durations are given in seconds.
"""

CONFIG_FILE_NAME = "config.yaml"

STRIPUTARY_SINK_NAME = "Striputary"
STRIPUTARY_SINK_DESCRIPTION = "Striputary"

STRIPUTARY_MONITOR_SINK_NAME = "StriputaryMonitor"
STRIPUTARY_MONITOR_SINK_DESCRIPTION = "StriputaryMonitor"

DEFAULT_BUFFER_FILE = "buffer.wav"
DEFAULT_SESSION_FILE = "session.yaml"
DEFAULT_MUSIC_DIR = "music"

DEFAULT_SERVICE = "spotify"

# This should be more than 3-4 seconds at least.
TIME_BEFORE_SESSION_START = 5.0
WAIT_TIME_BEFORE_FIRST_SONG = 1.0
TIME_AFTER_SESSION_END = 10.0

TIME_WITHOUT_DBUS_SIGNAL_BEFORE_STOPPING = 10.0
TIME_BETWEEN_SUBSEQUENT_DBUS_COMMANDS = 1.0

BITRATE = 192000
MIN_OFFSET = -3.0
MAX_OFFSET = 3.0
READ_BUFFER = 0.5
NUM_OFFSETS_TO_TRY = 1000
NUM_SAMPLES_PER_AVERAGE_VOLUME = 2000

NUM_PLOT_DATA_POINTS = 500

RECV_CUT_SONG_TIMEOUT = 0.002
RECV_CUT_INFO_TIMEOUT = 0.002
RECV_RECORDED_SONG_TIMEOUT = 0.002
RECV_RECORDED_SESSION_TIMEOUT = 0.002