"""PeerLink realtime messaging and notification backend."""
