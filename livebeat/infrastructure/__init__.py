"""Infrastructure adapters: clock, HTTP push, health listener, logging."""
