"""Building blocks for proxy servers: rewindable streams, configuration and option registries, logging, traffic recording, redirection and geodata decoding."""

__version__ = "0.1.0"