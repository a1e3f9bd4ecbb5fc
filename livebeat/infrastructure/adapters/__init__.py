"""Infrastructure adapters implementing application ports."""

from livebeat.infrastructure.adapters.system_time_authority import (
    SystemTimeAuthority,
)

__all__: list[str] = ["SystemTimeAuthority"]
