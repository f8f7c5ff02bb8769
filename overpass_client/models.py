from datetime import datetime

from attrs import define, field


@define(slots=True)
class ApiStatus:
    client_id: str | None = None
    current_time: datetime | None = None
    rate_limit: int | None = None
    slots_running: list[list[str]] = field(factory=list)
    slots_available_after: list[int | None] = field(factory=list)

    @property
    def is_parsed(self) -> bool:
        return self.client_id is not None
