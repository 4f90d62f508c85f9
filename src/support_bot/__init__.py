"""Discord support bot that learns from a server's own message history."""
