from __future__ import annotations

from dataclasses import dataclass, field

from ..data import BridgeClient


@dataclass(slots=True)
class ApiState:
    bridge: BridgeClient = field(default_factory=BridgeClient)


api_state = ApiState()
