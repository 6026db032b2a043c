[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "serialkit"
version = "4.7.2"
description = "Blocking serial port I/O with a builder API, port listing and command-line tools."
requires-python = ">=3.10"
dependencies = [
    "pyserial",
]
keywords = ["serial", "serial-port", "rs232", "uart", "tty", "pyserial"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
serialkit-list-ports = "serialkit.commands.list_ports:main"
serialkit-receive-data = "serialkit.commands.receive_data:main"
serialkit-transmit = "serialkit.commands.transmit:main"
serialkit-duplex = "serialkit.commands.duplex:main"
serialkit-clear-input-buffer = "serialkit.commands.clear_input_buffer:main"
serialkit-clear-output-buffer = "serialkit.commands.clear_output_buffer:main"
serialkit-loopback = "serialkit.commands.loopback:main"
serialkit-hardware-check = "serialkit.commands.hardware_check:main"

[tool.hatch.build.targets.wheel]
packages = ["serialkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
