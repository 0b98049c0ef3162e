"""HTTP API for the Cash or Card service."""
