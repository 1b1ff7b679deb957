"""Deal explainer — one plain-English sentence on why a bundle ranks well."""

import logging

from truefare.config import settings
from truefare.schemas.bundle import Bundle, ExplainResponse
from truefare.services.cache_service import CacheService, cache_service
from truefare.services.llm_client import LLMClient, llm_client

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "Be concise and helpful."

FALLBACK_EXPLANATION = "Great overall value given time, comfort, and cost."


def format_currency(amount: float, currency: str = "USD") -> str:
    symbol = "$" if currency == "USD" else f"{currency} "
    return f"{symbol}{amount:,.2f}"


def format_duration(minutes: int) -> str:
    return f"{minutes // 60}h {minutes % 60}m"


class DealExplainer:
    """Explains bundles through the LLM client, with static fallbacks."""

    def __init__(self, client: LLMClient = llm_client, cache: CacheService | None = None):
        self.client = client
        self.cache = cache

    async def explain(self, bundle: Bundle) -> ExplainResponse:
        if not self.client.available:
            return ExplainResponse(explanation=self._static_summary(bundle), generated=False)

        payload = bundle.model_dump(mode="json")
        if self.cache is not None:
            cached = await self.cache.get_explanation(payload)
            if cached:
                return ExplainResponse(explanation=cached, generated=True)

        try:
            text = await self.client.complete(SYSTEM_PROMPT, self._build_prompt(bundle), max_tokens=70)
        except RuntimeError as e:
            logger.error(f"LLM explanation failed: {e}")
            return ExplainResponse(explanation=FALLBACK_EXPLANATION, generated=False)

        if not text:
            return ExplainResponse(explanation=FALLBACK_EXPLANATION, generated=False)
        if self.cache is not None:
            await self.cache.set_explanation(payload, text)
        return ExplainResponse(explanation=text, generated=True)

    def _build_prompt(self, bundle: Bundle) -> str:
        flight = bundle.flight
        currency = flight.currency
        hotel_text = "none"
        if bundle.hotel:
            hotel_text = f"{bundle.hotel.name} (~{bundle.hotel.stars or 4}★)"
        car_text = f"{bundle.car.vendor} {bundle.car.car_class}" if bundle.car else "none"

        return (
            "You are a travel deal explainer. In one short sentence, explain why this bundle is good. "
            "Use plain English, avoid jargon.\n\n"
            f"Flight price: {format_currency(flight.price, currency)}. "
            f"Flight legs: {len(flight.legs)}. "
            f"Total duration: {format_duration(flight.total_duration_minutes)}. "
            f"Fare brand: {flight.fare_brand}. "
            f"Seat pitch: {flight.seat_pitch or 31}.\n"
            f"Hotel set: {hotel_text}.\n"
            f"Car set: {car_text}.\n"
            f"TrueTotal: {format_currency(bundle.true_total, currency)}. DealRank: {bundle.deal_rank}.\n"
        )

    def _static_summary(self, bundle: Bundle) -> str:
        shape = "balanced connections" if len(bundle.flight.legs) > 1 else "nonstop"
        total = format_currency(bundle.true_total, bundle.flight.currency)
        return f"Strong value: {shape}, good comfort, and low total cost {total}."


deal_explainer = DealExplainer(cache=cache_service if settings.search_cache_enabled else None)
