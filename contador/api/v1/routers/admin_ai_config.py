# contador/api/v1/routers/admin_ai_config.py
"""
Panel de administración del proveedor de IA (solo SuperAdmin).
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from contador.db.session import get_db
from contador.core.security import require_superadmin
from contador.schemas.ai_config import AIConfigResponse, AIConfigUpdate, AITestResponse
from contador.schemas.common import ErrorResponse
from contador.services.ai_config_service import get_admin_config, update_admin_config
from contador.services.ai_provider import AIProviderError, AVAILABLE_MODELS, call_ai, get_provider_info
from contador.utils.logger import logger

router = APIRouter()

TEST_PROMPT = "Responde únicamente con la palabra OK."


@router.get("", response_model=AIConfigResponse, summary="Configuración de IA")
def get_config(db: Session = Depends(get_db), current_user=Depends(require_superadmin)):
    return get_admin_config(db)


@router.put("", response_model=AIConfigResponse, summary="Actualizar configuración de IA")
def update_config(
    payload: AIConfigUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(require_superadmin),
):
    """
    Las credenciales se guardan cifradas. Enviar '********' conserva la
    credencial existente.
    """
    update_admin_config(db, payload.model_dump(exclude_unset=True))
    logger.info(f"Configuración de IA actualizada por usuario {current_user.id}")
    return get_admin_config(db)


@router.get("/models", summary="Modelos disponibles por proveedor")
def list_models(db: Session = Depends(get_db), current_user=Depends(require_superadmin)):
    return {"models": AVAILABLE_MODELS, "current": get_provider_info(db)}


@router.post(
    "/test",
    response_model=AITestResponse,
    responses={502: {"model": ErrorResponse}},
    summary="Probar conexión con el proveedor",
)
def test_config(db: Session = Depends(get_db), current_user=Depends(require_superadmin)):
    try:
        response = call_ai(
            db,
            system_prompt="Eres un asistente de prueba.",
            messages=[{"role": "user", "content": TEST_PROMPT}],
            max_tokens=20,
            usuario_id=current_user.id,
            prompt_type="test",
        )
    except AIProviderError as e:
        logger.warning(f"Prueba de IA fallida: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return AITestResponse(
        success=True,
        provider=response.provider,
        model=response.model,
        response=response.content,
        input_tokens=response.input_tokens,
        output_tokens=response.output_tokens,
    )
