"""Service layer shared by the CLI and API."""
