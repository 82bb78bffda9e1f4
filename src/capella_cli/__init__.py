"""capella-cli: retrying REST client and reconciliation commands for Couchbase Capella."""

__version__ = "0.1.0"
