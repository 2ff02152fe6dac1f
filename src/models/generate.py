from pydantic import BaseModel, ConfigDict
from typing import Optional


class GenerateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    prompt: Optional[str] = None
    hardwareData: Optional[str] = None


class ComponentSpec(BaseModel):
    componentName: str
    componentDescription: str


class ErrorResponse(BaseModel):
    message: str
    errorCode: Optional[str] = None
    errorDetails: Optional[str] = None
