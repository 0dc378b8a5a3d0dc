"""medboard: authentication and session lifecycle service for the medboard job board."""
