# contador/api/v1/routers/ai_chat.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from contador.db.session import get_db
from contador.core.company_access import require_company_access
from contador.core.security import get_current_usuario
from contador.schemas.ai_config import ChatRequest, ChatResponse
from contador.schemas.common import ErrorResponse
from contador.services.ai_provider import AIProviderError, call_ai
from contador.utils.logger import logger

router = APIRouter()

SYSTEM_PROMPT = (
    "Eres un asistente contable y tributario especializado en la normativa peruana "
    "(SUNAT, IGV, renta, comprobantes electrónicos, PLE y detracciones). "
    "Responde en español, de forma clara y breve. Si la consulta depende de datos "
    "que no tienes, indícalo y sugiere qué revisar."
)

MAX_HISTORY = 20


def _system_prompt(company) -> str:
    if company is None:
        return SYSTEM_PROMPT
    return (
        f"{SYSTEM_PROMPT}\n\nEmpresa del usuario: {company.razon_social} "
        f"(RUC {company.ruc}, régimen {company.regimen or 'no indicado'})."
    )


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={502: {"model": ErrorResponse}},
    summary="Asistente contable",
)
def chat(payload: ChatRequest, db: Session = Depends(get_db), current_user=Depends(get_current_usuario)):
    company = None
    if payload.company_id is not None:
        company = require_company_access(db, payload.company_id, current_user)

    messages = [m.model_dump() for m in payload.history[-MAX_HISTORY:]]
    messages.append({"role": "user", "content": payload.message})

    try:
        response = call_ai(
            db,
            system_prompt=_system_prompt(company),
            messages=messages,
            usuario_id=current_user.id,
            company_id=company.id if company else None,
            prompt_type="chat",
        )
    except AIProviderError as e:
        logger.warning(f"Error del asistente IA: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return ChatResponse(reply=response.content, provider=response.provider, model=response.model)
