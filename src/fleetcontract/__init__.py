"""fleetcontract - fleet maintenance contract requests from the command line."""

__version__ = "0.1.0"
