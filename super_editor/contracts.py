from typing import Any, Dict, List

from pydantic import BaseModel


class AuthorizeRequest(BaseModel):
    actor_id: int
    capability: str
    args: List[Any] = []


class AuthorizeResponse(BaseModel):
    actor_id: int
    capability: str
    allowed: bool
    capabilities: List[str]


class CapabilitiesResponse(BaseModel):
    actor_id: int
    role: str
    capabilities: Dict[str, bool]


class AdminMenuResponse(BaseModel):
    actor_id: int
    menu: Dict[str, List[str]]
