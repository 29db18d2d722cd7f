from typing import Any, Dict, Optional

from pydantic import BaseModel, field_validator

PROTOCOL_VERSION = "1.0"


class AliceSession(BaseModel):
    session_id: str
    new: bool = False


class AliceUtterance(BaseModel):
    original_utterance: Optional[str] = ""

    @field_validator("original_utterance")
    @classmethod
    def _none_to_empty(cls, value: Optional[str]) -> str:
        return value or ""


class AliceRequest(BaseModel):
    session: AliceSession
    request: AliceUtterance
    version: str = PROTOCOL_VERSION


class AliceReply(BaseModel):
    text: str
    end_session: bool = False


class AliceResponse(BaseModel):
    response: AliceReply
    version: str = PROTOCOL_VERSION

    @classmethod
    def say(cls, text: str, end_session: bool = False) -> "AliceResponse":
        return cls(response=AliceReply(text=text, end_session=end_session))


class HealthResponse(BaseModel):
    status: str
    time: str
    memory: Dict[str, Any]
    sessions: int
    model: str
    provider: str
