[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "striputary"
version = "0.1.0"
description = "Record streamed album playback through PulseAudio and cut it into tagged per-song Opus files."
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["audio", "recording", "mpris", "pulseaudio", "ffmpeg", "opus"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Capture/Recording",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
striputary = "striputary.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["striputary"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
