"""Bilingual (English/Hindi) bill text generation."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from tenantbill.config import Settings
from tenantbill.core.exceptions import BillTextError
from tenantbill.services.templating import get_environment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BillSummary:
    """Fully computed figures handed to a bill text generator."""

    tenant_name: str
    bill_date: str
    due_date: str
    current_reading: Decimal
    previous_reading: Decimal
    units_consumed: Decimal
    unit_rate: Decimal
    previous_due: Decimal
    electricity_charges: Decimal
    water_charges: Decimal  # As entered, shown only when applied
    apply_water_charges: bool
    penalty: Decimal
    total_amount: Decimal


@dataclass(frozen=True)
class BillTexts:
    """Formatted bill in both supported languages."""

    english: str
    hindi: str


class BillTextGenerator(Protocol):
    """Turns a computed bill into human-readable text."""

    async def generate(self, summary: BillSummary) -> BillTexts: ...


class TemplateBillTextGenerator:
    """Renders the fixed bill layouts locally, without a language model."""

    def __init__(self, contact_phone: str):
        self._contact_phone = contact_phone
        self._env = get_environment()

    async def generate(self, summary: BillSummary) -> BillTexts:
        context = {"bill": summary, "contact_phone": self._contact_phone}
        return BillTexts(
            english=self._env.get_template("bill_en.txt.j2").render(context),
            hindi=self._env.get_template("bill_hi.txt.j2").render(context),
        )


class GeminiBillTextGenerator:
    """Asks Gemini to lay the bill out in English and Hindi."""

    def __init__(self, api_key: str, model_name: str, contact_phone: str):
        genai.configure(api_key=api_key)
        self._model = genai.GenerativeModel(model_name)
        self._model_name = model_name
        self._contact_phone = contact_phone
        self._env = get_environment()

    def build_prompt(self, summary: BillSummary) -> str:
        """Renders the prompt sent to the model for ``summary``."""
        return self._env.get_template("bill_prompt.txt.j2").render(
            bill=summary, contact_phone=self._contact_phone
        )

    async def generate(self, summary: BillSummary) -> BillTexts:
        prompt = self.build_prompt(summary)
        logger.info(
            f"Requesting bill text for '{summary.tenant_name}' from {self._model_name}."
        )
        try:
            response = await self._model.generate_content_async(
                prompt,
                generation_config={"response_mime_type": "application/json"},
            )
            payload = json.loads(response.text)
        except (google_exceptions.GoogleAPIError, ValueError) as e:
            logger.error(f"Bill text generation failed: {e}", exc_info=True)
            raise BillTextError(f"Bill text generation failed: {e}") from e

        return parse_bill_texts(payload)


def parse_bill_texts(payload: object) -> BillTexts:
    """Extracts both bill texts from the model's JSON answer."""
    if not isinstance(payload, dict):
        raise BillTextError("Bill text answer is not a JSON object.")
    english = payload.get("englishBill")
    hindi = payload.get("hindiBill")
    if not isinstance(english, str) or not isinstance(hindi, str):
        raise BillTextError(
            "Bill text answer is missing 'englishBill' or 'hindiBill'."
        )
    return BillTexts(english=english, hindi=hindi)


def build_text_generator(settings: Settings) -> BillTextGenerator:
    """Uses Gemini when an API key is configured, local templates otherwise."""
    if settings.GEMINI_API_KEY:
        logger.info(f"Bill text via Gemini model {settings.GEMINI_MODEL}.")
        return GeminiBillTextGenerator(
            api_key=settings.GEMINI_API_KEY,
            model_name=settings.GEMINI_MODEL,
            contact_phone=settings.CONTACT_PHONE,
        )
    logger.info("GEMINI_API_KEY missing, bill text rendered from templates.")
    return TemplateBillTextGenerator(contact_phone=settings.CONTACT_PHONE)

