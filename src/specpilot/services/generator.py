"""AI-backed canonical spec generation.

One blocking round trip per call, no retries: a failed or unparseable
completion surfaces immediately as ``GenerationError``. Every generated spec
is passed through the deterministic validator before it is returned.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

import openai
import pydantic
from openai import AsyncOpenAI

from specpilot.config import settings
from specpilot.errors.exceptions import GenerationError
from specpilot.models.canonical import CanonicalSpec
from specpilot.services.validator import validate_spec

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are SpecPilot, a CDP intake analysis and requirement-specification agent.
Convert vague product, analytics or CDP tracking requests into a structured,
destination-neutral canonical tracking specification.
- Always produce valid JSON unless explicitly asked otherwise.
- Never invent fields not implied by the input; list gaps in "open_questions".
- Never use Segment, Adobe or other vendor-specific terminology.
- Be concise, deterministic and factual."""

EXTRACTOR_PROMPT = """Extract the tracking requirements from the intake below.

Rules:
- Cover the complete user journey: typically 3-6 events, never fewer than 2.
- Event names are Title Case with spaces ("Product Added to Cart").
- Property names are snake_case; types are one of string, number, boolean,
  integer, array, object, datetime.
- identity.primary defaults to "user_id"; list related identifiers in
  identity.secondary.
- Classify every property's PII: high (email, phone, name, address), medium
  (ip_address, location, device_id), low (user_id, session_id, anonymous_id),
  none (ids of products/orders, timestamps, prices, quantities).
- High and medium PII set consent.required = true.
- Include at least 2 destinations, 3 acceptance criteria and 2-3 specific
  open questions.

Intake:
\"\"\"{intake}\"\"\"

Respond with JSON of this shape only:
{{
  "metadata": {{"title": str, "summary": str, "requestor": null,
               "submitted_at": "{submitted_at}", "status": "draft"}},
  "events": [{{
    "name": str, "description": str, "trigger": str,
    "properties": [{{"name": str, "type": str, "required": bool, "description": str,
                    "pii": {{"classification": "none|low|medium|high", "reason": str}},
                    "consent": {{"required": bool, "policy_group": str|null}}}}],
    "identity": {{"primary": str|null, "secondary": [str], "stitching_assumptions": str}},
    "business_rules": [str], "technical_rules": [str]
  }}],
  "destinations": [{{"name": str, "requirements": [str], "notes": str}}],
  "acceptance_criteria": [str],
  "open_questions": [str]
}}"""

SUMMARIZER_PROMPT = """Turn this canonical tracking spec into a professional Markdown
requirement document suitable for Jira and Slack. Use the exact data from the
spec: include every event, property, identity, PII level, destination,
acceptance criterion and open question. Use Markdown tables for properties,
identity and PII. Output only the Markdown.

Canonical spec:
{spec_json}"""

IMPROVE_PROMPT = """Rewrite this CDP tracking request so it is clearer and more specific,
keeping it as natural prose of 1-3 sentences. Add missing details inline, do
not use bullet points, headings or property lists. Output only the improved
text.

Original request:
{intake}"""


class SpecGenerator:
    """Thin wrapper over the OpenAI chat completions API."""

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        *,
        model: str | None = None,
        summary_model: str | None = None,
        improve_model: str | None = None,
        timeout: float | None = None,
    ):
        self._client = client
        self.model = model or settings.openai_model
        self.summary_model = summary_model or settings.openai_summary_model
        self.improve_model = improve_model or settings.openai_improve_model
        self.timeout = timeout or settings.generator_timeout_seconds

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not settings.openai_api_key:
                raise GenerationError("OpenAI API key is not configured")
            self._client = AsyncOpenAI(api_key=settings.openai_api_key, timeout=self.timeout)
        return self._client

    async def _complete(self, model: str, messages: list[dict], **kwargs) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=messages,
                **kwargs,
            )
        except openai.OpenAIError as exc:
            logger.error("OpenAI request failed (model=%s): %s", model, exc)
            raise GenerationError("AI request failed", details={"reason": str(exc)}) from exc
        return (response.choices[0].message.content or "") if response.choices else ""

    async def generate_canonical(self, intake: str) -> CanonicalSpec:
        """Extract a canonical spec from free text and validate it."""
        prompt = EXTRACTOR_PROMPT.format(
            intake=intake,
            submitted_at=datetime.now(timezone.utc).isoformat(),
        )
        raw = await self._complete(
            self.model,
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=0.1,
            response_format={"type": "json_object"},
        )
        try:
            payload = json.loads(raw or "{}")
        except json.JSONDecodeError as exc:
            logger.error("Could not parse AI response as CanonicalSpec JSON: %.200s", raw)
            raise GenerationError("Could not parse AI response as CanonicalSpec JSON") from exc
        if not isinstance(payload, dict):
            raise GenerationError("AI response is not a JSON object")

        try:
            spec = validate_spec(CanonicalSpec.model_validate(payload))
        except pydantic.ValidationError as exc:
            logger.error("AI response is not a usable CanonicalSpec: %s", exc)
            raise GenerationError(
                "AI response is not a usable CanonicalSpec",
                details={"errors": exc.errors(include_url=False, include_context=False, include_input=False)},
            ) from exc
        logger.info("Generated canonical spec '%s' with %d events", spec.metadata.title, len(spec.events))
        return spec

    async def summarize(self, spec: CanonicalSpec) -> str:
        """Render a canonical spec as Markdown through the model."""
        prompt = SUMMARIZER_PROMPT.format(
            spec_json=json.dumps(spec.model_dump(mode="json"), indent=2),
        )
        return await self._complete(
            self.summary_model,
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=0.2,
        )

    async def generate_markdown(self, intake: str) -> str:
        """Free text -> canonical spec -> human-readable Markdown."""
        spec = await self.generate_canonical(intake)
        return await self.summarize(spec)

    async def improve_intake(self, intake: str) -> str:
        """Rewrite vague intake text; falls back to the original on an empty reply."""
        improved = await self._complete(
            self.improve_model,
            [{"role": "user", "content": IMPROVE_PROMPT.format(intake=intake)}],
            max_tokens=300,
            temperature=0.7,
        )
        return improved.strip() or intake
