"""Assistant service over any OpenAI-compatible chat endpoint."""

import json
import logging
import random
import re
import time
from typing import Any, Callable, Dict, List, Optional

from openai import OpenAI

from ..models.leads import Lead
from ..models.riders import Rider
from ..models.users import Viewer
from ..prompts.templates import (
    CHAT_SYSTEM_PROMPT,
    DASHBOARD_ANALYST_PROMPT,
    FLEET_SYSTEM_CONTEXT,
    LEAD_ADVISOR_PROMPT,
    LEAD_SCORER_PROMPT,
    PAYMENT_REMINDER_PROMPT,
    REMINDER_VARIATIONS,
    TONES,
)
from ..utils.whatsapp import format_inr

logger = logging.getLogger(__name__)

NEUTRAL_LEAD_SCORE = 50


class AIServiceError(Exception):
    """The model provider call failed."""


def clean_text(text: str) -> str:
    """Strip markdown emphasis the chat widgets render badly."""
    return text.replace("**", "").replace("*", "-").strip()


def fallback_reminder(rider: Rider, language: str) -> str:
    amount = format_inr(abs(rider.wallet_amount))
    if language == "hindi":
        return (
            f"नमस्ते *{rider.rider_name}*, आपके वॉलेट में *{amount}* की बकाया राशि है। "
            "कृपया अपनी सेवाओं को जारी रखने के लिए इसे जल्द से जल्द क्लियर करें। धन्यवाद।"
        )
    return (
        f"Dear *{rider.rider_name}*, this is a friendly reminder about your outstanding "
        f"balance of *{amount}*. Please clear your dues at the earliest. Thank you!"
    )


class AIService:
    """Service wrapper for an OpenAI-compatible API via the OpenAI SDK."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None
    ):
        """
        Initialize the assistant service.

        Args:
            api_key: Provider API key
            model: Chat model identifier
            base_url: Endpoint override for OpenAI-compatible providers
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self._client: Optional[OpenAI] = None

    @property
    def client(self) -> OpenAI:
        """Lazy-initialize the OpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise AIServiceError("AI API key is required")
            self._client = OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def _call_model(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 1024
    ) -> str:
        """
        Make a chat completion call with the fleet context prepended.

        Returns:
            Model response text
        """
        logger.debug(f"Calling {self.model} (temp={temperature}, max_tokens={max_tokens})")

        messages = [
            {"role": "system", "content": f"{FLEET_SYSTEM_CONTEXT}\n{system_prompt}"},
            {"role": "user", "content": user_prompt}
        ]

        started = time.monotonic()
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens
            )
        except AIServiceError:
            raise
        except Exception as e:
            # Sanitize error message to avoid exposing API keys
            error_msg = str(e).replace(self.api_key, "***API_KEY***") if self.api_key else str(e)
            logger.warning(f"Model call failed: {error_msg}")
            raise AIServiceError(f"AI API error: {error_msg}") from e

        content = response.choices[0].message.content or ""
        logger.info(f"Model replied with {len(content)} chars in {time.monotonic() - started:.2f}s")
        return content

    def call_with_retry(
        self,
        call_fn: Callable[[], str],
        max_retries: int = 2,
        delay: float = 1.0
    ) -> str:
        """Call `call_fn`, retrying with linear backoff on AIServiceError."""
        last_error: Optional[Exception] = None

        for attempt in range(max_retries + 1):
            try:
                return call_fn()
            except AIServiceError as e:
                last_error = e
                if attempt < max_retries:
                    time.sleep(delay * (attempt + 1))

        raise last_error

    @staticmethod
    def extract_json(text: str) -> Any:
        """
        Extract JSON from a model response.

        A bare JSON value (number, list) is returned as parsed; callers
        check the shape they expect.

        Raises:
            ValueError: No parseable JSON object found
        """
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            pass

        # JSON in a markdown code block
        block = re.search(r'```(?:json)?\s*([\s\S]*?)\s*```', text)
        if block:
            try:
                return json.loads(block.group(1))
            except json.JSONDecodeError:
                pass

        # Bare object somewhere in the text
        obj = re.search(r'\{[\s\S]*\}', text)
        if obj:
            try:
                return json.loads(obj.group(0))
            except json.JSONDecodeError:
                pass

        raise ValueError(f"Could not extract valid JSON from response: {text[:200]}...")

    # --- Public helpers; these never raise ---

    def dashboard_insights(self, stats: Dict[str, Any], role: str) -> str:
        prompt = (
            f"Analyze these fleet statistics for a {role} dashboard and provide a concise, "
            f"motivating, and actionable 2-sentence summary.\nStats: {json.dumps(stats, default=str)}"
        )
        try:
            return clean_text(self._call_model(DASHBOARD_ANALYST_PROMPT, prompt, temperature=0.3))
        except AIServiceError:
            return "AI is analyzing your fleet performance..."

    def score_lead(self, lead: Lead) -> int:
        """Model-assigned score 0-100; 50 when the model is unavailable."""
        data = lead.model_dump(
            mode="json",
            include={"driving_license", "ev_type_interested", "client_interested", "current_ev_using", "source", "city"}
        )
        try:
            text = self.call_with_retry(
                lambda: self._call_model(LEAD_SCORER_PROMPT, f"Data: {json.dumps(data)}", temperature=0.2)
            )
            parsed = self.extract_json(text)
            if isinstance(parsed, dict):
                score = int(parsed.get("score", NEUTRAL_LEAD_SCORE))
            elif isinstance(parsed, (int, float)) and not isinstance(parsed, bool):
                score = int(parsed)
            else:
                raise ValueError(f"Unexpected score payload: {parsed!r}")
        except (AIServiceError, ValueError, TypeError) as e:
            logger.warning(f"Lead scoring fell back to neutral score: {e}")
            return NEUTRAL_LEAD_SCORE
        return max(0, min(100, score))

    def lead_recommendation(self, lead: Lead) -> str:
        data = lead.model_dump(mode="json", exclude={"location"})
        try:
            return clean_text(self._call_model(LEAD_ADVISOR_PROMPT, f"Lead: {json.dumps(data)}"))
        except AIServiceError:
            return "Review and follow up."

    def payment_reminder(
        self,
        rider: Rider,
        language: str = "english",
        tone: str = "professional"
    ) -> str:
        """WhatsApp payment reminder text, falling back to a fixed template."""
        amount = format_inr(abs(rider.wallet_amount))
        language_instruction = (
            "OUTPUT MUST BE IN PURE HINDI (Devanagari script)."
            if language == "hindi" else "Write the message in English."
        )

        prompt = f"""Generate a UNIQUE WhatsApp payment reminder for a rider.
Rider Name: {rider.rider_name}
Outstanding Amount: {amount}

INSTRUCTIONS:
1. {language_instruction}
2. Tone: {TONES.get(tone, TONES["professional"])}
3. The message MUST include the Rider Name ("{rider.rider_name}") and the Amount ("{amount}") clearly.
4. VARIATION INSTRUCTION: {random.choice(REMINDER_VARIATIONS)}
5. Keep it concise (2-3 sentences).
6. Do not include any introductory text, just the message body.

Return ONLY the final message text ready to send."""

        try:
            text = self._call_model(PAYMENT_REMINDER_PROMPT, prompt)
        except AIServiceError:
            return fallback_reminder(rider, language)
        return clean_text(text) or fallback_reminder(rider, language)

    def chat_with_bot(
        self,
        message: str,
        history: List[Dict[str, str]],
        viewer: Viewer,
        stats: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Answer a support chat message.

        Args:
            message: Latest user message
            history: Earlier turns as {"role": "user"|"ai", "content": ...}
            viewer: Who is chatting
            stats: Live dashboard numbers the model may quote
        """
        system = CHAT_SYSTEM_PROMPT.format(user_name=viewer.full_name, role=viewer.role)
        if stats:
            lines = "\n".join(f"- {key}: {value}" for key, value in stats.items())
            system += (
                f"\n\n[LIVE DASHBOARD STATS]:\n{lines}\n"
                "(Use these numbers to answer user queries accurately. Do not invent numbers.)"
            )

        conversation = "\n".join(
            f"{'User' if turn.get('role') == 'user' else 'AI'}: {turn.get('content', '')}"
            for turn in history
        )
        prompt = f"{conversation}\nUser: {message}" if conversation else f"User: {message}"

        try:
            return self._call_model(system, prompt)
        except AIServiceError:
            return "I am currently offline."


class MockAIService(AIService):
    """Deterministic assistant for UI testing without API calls."""

    def __init__(self):
        super().__init__(api_key="mock", model="mock")

    def _call_model(self, system_prompt: str, user_prompt: str, temperature: float = 0.7, max_tokens: int = 1024) -> str:
        raise AIServiceError("mock mode")

    def score_lead(self, lead: Lead) -> int:
        return NEUTRAL_LEAD_SCORE

    def chat_with_bot(self, message, history, viewer, stats=None) -> str:
        if stats:
            summary = ", ".join(f"{key}: {value}" for key, value in stats.items())
            return f"(mock) Here is what I can see right now: {summary}."
        return "(mock) Thanks for your message, an admin will get back to you shortly."
