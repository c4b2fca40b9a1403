from fastapi import APIRouter
from pydantic import BaseModel

from service import pricing_service, prompt_service

router = APIRouter(prefix="/api", tags=["catalog"])


class ConfirmTierRequest(BaseModel):
    tier: str | None = None


@router.get("/prompts")
def list_prompts():
    return {"success": True, "prompts": prompt_service.PROMPT_TEMPLATES}


@router.get("/prompts/suggestion")
def suggest_prompt():
    return {"success": True, "prompt": prompt_service.suggest_prompt()}


@router.get("/pricing")
def list_pricing():
    return {"success": True, "tiers": pricing_service.list_tiers()}


@router.post("/pricing/confirm")
def confirm_pricing(req: ConfirmTierRequest):
    """결제 없이 요금제 선택만 확인한다. 이후 클라이언트가 create-image를 호출."""
    return {"success": True, **pricing_service.confirm_tier(req.tier)}
