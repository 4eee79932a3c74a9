import json
import logging
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional

from django.conf import settings
from openai import OpenAI

logger = logging.getLogger(__name__)

QUIZ_SYSTEM_PROMPT = """
You are the "Debt Eraser", a ruthless, no-nonsense financial strategist.
Your goal is to analyze the user's financial situation based on 8 deep-dive questions.

You must assign a "Financial Archetype" (e.g., The Survivor, The Brawler, The Strategist) and a "Battle Plan".

CRITICAL: You must assign one of the following SPECIFIC "PDF Stacks" based on their answers:
1. "Mortgage Remedy Stack" (If mortgage/foreclosure mentioned)
2. "Repo Reversal Stack" (If car repossession/auto loans mentioned)
3. "Revolving Credit Stax" (If high credit card usage/utilization mentioned)
4. "Collections & Repo Stax" (If 3rd party collections mentioned)
5. "Administrative Remedy Stax" (If court/tickets/governmental issues mentioned)
6. "Credit Profile Sweep Stax" (General cleanup/inquiries/late payments)

Return purely JSON: { "archetype": "string", "plan": "string", "pdfStack": "string" }
"""

CHAT_SYSTEM_PROMPT = """
You are the "War Room AI", a specialized expert system for the Debt Eraser Pro community.
You are trained on:
- FCRA (Fair Credit Reporting Act)
- FDCPA (Fair Debt Collection Practices Act)
- Metro 2 Compliance
- E-OSCAR system loopholes
- Factual Disputing strategies
- 1099-C Cancellation of Debt
- Contract Law regarding note issuance

Your Role:
- You help members create custom dispute letters.
- You explain complex legal codes in simple, aggressive terms.
- You are strictly on the side of the consumer.
- You DO NOT give legal advice, you give "educational strategies" based on federal law.

Tone:
- High-level consultant ($1000/hr value).
- Direct, no fluff.
- "We don't pay what we don't owe."

If asked about documents, refer to "The Vault".
If asked about process, refer to "The Classroom modules".
"""

PDF_STACKS = (
    "Mortgage Remedy Stack",
    "Repo Reversal Stack",
    "Revolving Credit Stax",
    "Collections & Repo Stax",
    "Administrative Remedy Stax",
    "Credit Profile Sweep Stax",
)

CHAT_INTRO = ("I am the War Room AI. I have full access to the FDCPA, FCRA, and the Debt Eraser "
              "Knowledge Base. What is your situation?")
CHAT_FALLBACK_REPLY = "The encrypted channel is experiencing interference. Please try again."
CHAT_EMPTY_REPLY = "Connection interrupted. Try again."

STATUS_OK = "ok"
STATUS_FALLBACK = "fallback"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class AnalysisResult:
    archetype: str
    plan: str
    pdf_stack: str

    def as_response(self) -> Dict[str, str]:
        return {"archetype": self.archetype, "plan": self.plan, "pdfStack": self.pdf_stack}


@dataclass(frozen=True)
class AnalysisOutcome:
    """What the gateway produced and whether it came from the model or the fallback."""
    result: AnalysisResult
    status: str = STATUS_OK
    error: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.status != STATUS_OK

    def as_dict(self) -> dict:
        return {"result": asdict(self.result), "status": self.status, "error": self.error}


DEFAULT_ANALYSIS = AnalysisResult(
    archetype="The Survivor",
    plan=("The system is failing. We'll bypass the API and go manual. Your situation requires "
          "immediate validation letters sent to all bureaus."),
    pdf_stack="Credit Profile Sweep Stax",
)


class AIUnavailable(Exception):
    pass


def get_client() -> OpenAI:
    if not settings.OPENAI_API_KEY:
        raise AIUnavailable("OPENAI_API_KEY is not configured")
    return OpenAI(api_key=settings.OPENAI_API_KEY, timeout=settings.EXTERNAL_API_TIMEOUT)


def build_quiz_prompt(answers: List[Dict[str, str]]) -> str:
    lines = "\n".join(f"- {a['question']}: {a['answer']}" for a in answers)
    return f"User Profile:\n{lines}\n\nAnalyze and provide JSON output."


def normalize_pdf_stack(label: str) -> str:
    """Canonical spelling for a known stack, anything else passes through."""
    for known in PDF_STACKS:
        if label.strip().lower() == known.lower():
            return known
    logger.warning("Model returned an unrecognized PDF stack: %r", label)
    return label.strip()


def parse_analysis(raw: str) -> AnalysisResult:
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("analysis reply is not a JSON object")

    fields = {}
    for key in ("archetype", "plan", "pdfStack"):
        value = data.get(key)
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"analysis reply is missing {key}")
        fields[key] = value.strip()

    return AnalysisResult(
        archetype=fields["archetype"],
        plan=fields["plan"],
        pdf_stack=normalize_pdf_stack(fields["pdfStack"]),
    )


def analyze_quiz(answers: List[Dict[str, str]]) -> AnalysisOutcome:
    """
    Classify a finished quiz through the model.

    Never raises: a network error, a malformed reply or a missing key all
    yield DEFAULT_ANALYSIS with a fallback status.
    """
    try:
        client = get_client()
        response = client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=[
                {"role": "system", "content": QUIZ_SYSTEM_PROMPT},
                {"role": "user", "content": build_quiz_prompt(answers)},
            ],
            response_format={"type": "json_object"},
            max_tokens=500,
            temperature=0.7,
        )
        raw = response.choices[0].message.content or ""
        return AnalysisOutcome(result=parse_analysis(raw))
    except Exception as e:
        logger.warning("Quiz analysis fell back to the default record: %s", e)
        return AnalysisOutcome(result=DEFAULT_ANALYSIS, status=STATUS_FALLBACK, error=str(e))


def chat_reply(transcript: List[Dict[str, str]]) -> str:
    """Send the whole War Room transcript and return the model's next message. Raises on failure."""
    messages = [{"role": "system", "content": CHAT_SYSTEM_PROMPT}]
    for entry in transcript:
        role = "assistant" if entry["role"] == "model" else "user"
        messages.append({"role": role, "content": entry["text"]})

    client = get_client()
    response = client.chat.completions.create(
        model=settings.OPENAI_MODEL,
        messages=messages,
        max_tokens=800,
        temperature=0.8,
    )
    return (response.choices[0].message.content or "").strip()
