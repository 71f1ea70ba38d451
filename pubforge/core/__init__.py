"""Core building blocks: canonical hashing and the snapshot store."""
