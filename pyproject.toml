[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "relaykit"
version = "0.1.0"
description = "Building blocks for proxy servers: rewindable streams, config registries, logging, traffic recording, connection redirection and geodata decoding."
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = [
    "proxy",
    "relay",
    "geoip",
    "geosite",
    "logging",
    "configuration",
    "redirect",
]
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
    "Topic :: Internet :: Proxy Servers",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["relaykit"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
