"""Testing – in-memory doubles for the store and event-sink ports."""
