"""Object storage for submitted documents."""
