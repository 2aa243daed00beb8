"""Small runtime utilities shared across inflationkit."""
