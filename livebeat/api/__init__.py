"""HTTP surface of livebeat: the local health endpoint and wire models."""
