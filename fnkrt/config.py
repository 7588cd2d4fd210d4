"""Build-wide configuration values."""

#: Telemetry verbosity: 1 = errors, 2 = warnings, 3 = informational messages.
VERBOSE_LEVEL = 3

#: Maximum number of characters stored for a program name.
NAMESIZE = 12

#: Maximum number of function slots in a jump descriptor.
MAX_LIBFUNCTIONS = 32