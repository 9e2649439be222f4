"""HTTP transport of the PRIDE cloud: Flask server, requests client, config."""
