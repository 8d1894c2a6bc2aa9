"""Core path resolution, git queries and sync checks for gitstamp."""
