[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "midirouter"
version = "0.1.0"
description = "MIDI SysEx sequencing, capture and matching, with Korg DW-6000, Arturia BeatStep and Sequential Evolver support"
requires-python = ">=3.10"
dependencies = []
keywords = ["midi", "sysex", "synthesizer", "dw-6000", "beatstep", "evolver", "lfo"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Sound/Audio :: MIDI",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["midirouter"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
