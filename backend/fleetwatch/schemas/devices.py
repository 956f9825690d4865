from __future__ import annotations

from pydantic import BaseModel, ConfigDict

ONLINE_STATUS = "online"


class Device(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    device_id: str
    device_name: str = ""
    owner: str = ""
    location: str = ""
    status: str = ""
    hostname: str = ""
    ip_address: str = ""

    @property
    def is_online(self) -> bool:
        return self.status == ONLINE_STATUS
