# striputary

striputary records an album while a media player streams it. It then cuts the
recording into one tagged Opus file per song.

## How it works

**Recording.** striputary creates a PulseAudio null sink named `Striputary`
and moves the player's sink input onto it. `parec` then records the sink's
monitor to `buffer.wav`. Playback is controlled over MPRIS with `dbus-send`,
in these steps:

1. next track, then previous track;
2. play for 5 seconds, then pause;
3. go back to the start of the track and wait 1 second;
4. start playback.

While the album plays, `dbus-monitor` watches the player's
`PropertiesChanged` signals. Every new song is appended to `session.yaml`.

Recording ends in either of two ways:

- the player reports `Paused`;
- no new song has arrived for 10 seconds beyond the length of the last one.

A further 10 seconds are then recorded. A session whose directory already
holds a `buffer.wav` is not recorded again.

**Cutting.** The first cut is placed at the estimated start of the first song.
Each later cut follows from the song lengths before it. striputary reads an
excerpt from 3.5 s before to 3.5 s after every cut. It then tries 1000 common
offsets between −3 s and +3 s and keeps the one where the summed volume at the
cuts is lowest. The average volume at the chosen cuts is printed.

`ffmpeg` writes each song at 192 kbit/s to:

```
<session>/music/<artist>/<album>/<track>_<title>.opus
```

The title, album, artist, album artist and track number are stored as
metadata.

## Requirements

- Linux with PulseAudio or PipeWire, providing `pactl` and `parec`.
- `dbus-monitor` and `dbus-send`. The `spotify_chromium` service also needs
  `qdbus`.
- `ffmpeg` built with `libopus`.
- Python 3.10 or newer.

## Installation

```
pip install .
```

## Usage

```
striputary [OUTPUT_DIR] [SERVICE] [-m | --monitor] [-V | --version]
```

- `OUTPUT_DIR` is the directory that holds the recording sessions. A new
  session gets a sub-directory named after the local time it was created,
  in the form `YYYY-MM-DD-HH-MM-SS`.
- `SERVICE` is either `spotify_native` (the default) or `spotify_chromium`.
- `--monitor` keeps the playback audible while it is being recorded.

At start-up the most recently modified session is selected. striputary then
reads commands from a prompt:

| Command        | Effect |
|----------------|--------|
| `sessions`     | List the session directories; `*` marks the selected one. |
| `select N`     | Select session N. |
| `select new`   | Select a new session. |
| `show`         | List the visible cuts, each with the songs on either side and its time. `[x]` marks a cut whose following song has been cut. |
| `up`, `down`   | Scroll through the cuts. |
| `move N TIME`  | Set the cut of plot N to TIME. TIME is in seconds within the recording. Every later plot's cut moves to the same position within its own excerpt. |
| `cut`          | Cut all songs of the selected session in the background. |
| `record`       | Select a new session and start recording it in the background. |
| `songs`        | List the songs recorded so far in the running recording. |
| `quit`         | Leave. End of input also leaves. |

Any other input prints this list of commands.

## Configuration file

striputary looks for `striputary/config.yaml` in two places, in this order:

1. `$XDG_CONFIG_HOME`, or `~/.config` if that is not set;
2. the directories in `$XDG_CONFIG_DIRS`, or `/etc/xdg` if that is not set.

```yaml
output_dir: ~/recordings
service: spotify_native
monitor: false
```

Notes on the settings:

- `output_dir` is required in the file. A leading `~` is expanded, and the
  directory must already exist.
- Arguments on the command line take precedence over the file.
- If neither the command line nor the file gives an output directory,
  striputary stops with an error.

## Session files

`session.yaml` holds `songs`, a list of entries with `artist`, `album`,
`title`, `track_number` and `length` in seconds. It also holds
`estimated_time_first_song`, in seconds from the start of `buffer.wav`.

## Library use

The parts can also be used from Python:

- `striputary.wav.extract_audio` reads a stretch of a WAV file.
- `striputary.recording_session.RecordingSession` loads and saves sessions.
- `striputary.cut.get_excerpt_collection` finds the cuts.
- `striputary.cut.ffmpeg_command` builds the `ffmpeg` invocation for one song,
  and `striputary.cut.cut_song` runs it.

## What it does not do

- There is no graphical window and no plot drawing. Cuts are inspected and
  moved at the text prompt.
- The audio around a cut cannot be played back.

## Running the tests

```
pip install .[test]
pytest
```