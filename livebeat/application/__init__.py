"""Application layer for livebeat: ports and the monitor façade."""
