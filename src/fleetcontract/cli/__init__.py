"""Command-line interface for fleetcontract."""
