import logging
from typing import Any

from fastapi import APIRouter
from fastapi import Body
from fastapi import Query
from fastapi import Request

from app.core.translation import get_translation
from app.core.translation import lang_from_request
from app.models.onboarding import onboarding_schema

# Configure module logger
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/on-boarding/validate")
async def validate_onboarding(
    request: Request,
    body: Any = Body(...),
    partial: bool = Query(False, description="Validate as a partial update"),
) -> dict[str, Any]:
    """Dry-run validation of an onboarding body.

    Invalid bodies raise OnboardingValidationError, which app.main turns into a 400.
    """
    lang = lang_from_request(request)
    record = onboarding_schema(lang, partial=partial).validate(body)
    logger.info("Onboarding body validated (lang=%s, partial=%s)", lang, partial)
    return {
        "onBoarding": record.payload(),
        "message": get_translation(lang, "onBoarding_success_validated"),
    }
