"""EVM transport wiring: configuration, connections, dispatch and events."""
