[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tablehelper"
version = "0.1.0"
description = "Serial-port helper for lift-table controllers: checksummed frame protocol, line settings, saved attribute values and title-bar state"
requires-python = ">=3.10"
keywords = ["serial", "uart", "protocol", "lift table", "desk controller", "frames"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Terminals :: Serial",
]
dependencies = [
    "pyserial",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["tablehelper"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
