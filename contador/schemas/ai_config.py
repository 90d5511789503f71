# contador/schemas/ai_config.py
from pydantic import BaseModel, Field
from typing import Optional, Dict, List, Any, Literal


class AIConfigUpdate(BaseModel):
    """
    Solo se aplican los campos enviados.

    Para las credenciales: '********' conserva el valor guardado,
    cadena vacía lo elimina.
    """
    provider: Optional[Literal["anthropic", "bedrock", "openai"]] = None
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: Optional[str] = None
    openai_api_key: Optional[str] = None
    model: Optional[str] = None
    max_tokens: Optional[int] = Field(None, ge=1, le=200000)
    temperature: Optional[float] = Field(None, ge=0, le=2)
    enabled_features: Optional[Dict[str, bool]] = None


class AIConfigResponse(BaseModel):
    provider: str
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    aws_region: str
    has_aws_credentials: bool
    openai_api_key: str = ""
    has_openai_key: bool
    model: str
    max_tokens: int
    temperature: float
    enabled_features: Dict[str, bool]
    usage: Dict[str, Any]


class AITestResponse(BaseModel):
    success: bool
    provider: str
    model: str
    response: str
    input_tokens: int
    output_tokens: int


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    history: List[ChatMessage] = []
    company_id: Optional[int] = None


class ChatResponse(BaseModel):
    reply: str
    provider: str
    model: str
