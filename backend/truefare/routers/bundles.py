"""Bundle router — plain-English explanations for ranked bundles."""

import logging

from fastapi import APIRouter, Depends

from truefare.schemas.bundle import Bundle, ExplainResponse
from truefare.services.deal_explainer import DealExplainer, deal_explainer

logger = logging.getLogger(__name__)

router = APIRouter()


def get_deal_explainer() -> DealExplainer:
    return deal_explainer


@router.post("/explain", response_model=ExplainResponse)
async def explain_bundle(
    bundle: Bundle,
    explainer: DealExplainer = Depends(get_deal_explainer),
):
    """Explain why a bundle ranks well. Falls back to a static sentence."""
    return await explainer.explain(bundle)
