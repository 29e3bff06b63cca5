"""
Self-Introduction Pipeline

One-shot generation of a self-introduction strategy and script from the saved
resume context, plus an independent editable draft the script can be copied
into once.
"""

from typing import Optional, TYPE_CHECKING

from .context_store import ContextStore
from .errors import ValidationError
from .models import ContextKey, IntroResult
from ..utils import get_logger

if TYPE_CHECKING:
    from ..ai_processing.interview_gateway import InterviewAIGateway

logger = get_logger(__name__)

def _require(**fields: Optional[str]) -> None:
    missing = [name for name, value in fields.items() if not value or not value.strip()]
    if missing:
        raise ValidationError(f"Missing required input: {', '.join(missing)}")

class IntroDraft:
    """User-editable introduction text; never bound to a generated script."""

    def __init__(self, text: str = ""):
        self.text = text

    def update(self, text: str) -> None:
        self.text = text

class SelfIntroPipeline:
    """Generates, transfers, refines and saves self-introductions."""

    def __init__(self, gateway: "InterviewAIGateway", store: ContextStore):
        self.gateway = gateway
        self.store = store
        self.latest: Optional[IntroResult] = None
        self.draft = IntroDraft()
        self.is_generating = False

    async def generate_intro(self, resume_context: Optional[str], role: str, company: str) -> Optional[IntroResult]:
        """
        Generate a strategy rationale and spoken script.

        Raises:
            ValidationError: resume context, role or company missing

        Returns:
            The generated result, or None if the service gave nothing usable
        """
        _require(resume_context=resume_context, role=role, company=company)

        self.is_generating = True
        try:
            result = await self.gateway.generate_self_intro(resume_context, role, company)
        finally:
            self.is_generating = False

        if result is None:
            logger.warning(f"Could not generate self-introduction for {role} at {company}")
            return None

        self.latest = result
        logger.info(f"Generated self-introduction for {role} at {company}")
        return result

    async def generate_from_saved_resume(self, role: str, company: str) -> Optional[IntroResult]:
        """Generate using the resume context stored by the resume flow."""
        return await self.generate_intro(self.store.get_resume_context(), role, company)

    def transfer_script(self) -> bool:
        """Copy the latest generated script into the draft (one-shot copy)."""
        if self.latest is None or not self.latest.script:
            return False
        self.draft.update(self.latest.script)
        return True

    async def refine_draft(self, role: str, company: str) -> str:
        """Ask for a polished version and critique of the current draft; the draft is unchanged."""
        _require(draft=self.draft.text, role=role, company=company)
        return await self.gateway.refine_self_intro(self.draft.text, role, company)

    def save_draft(self, company: str, role: str) -> None:
        _require(company=company, role=role)
        self.store.save_intro_draft(ContextKey(company, role), self.draft.text)
        logger.info(f"Saved self-introduction draft for {role} at {company}")

    def load_draft(self, company: str, role: str) -> str:
        """Replace the draft with the one saved for this context (empty if none)."""
        _require(company=company, role=role)
        self.draft.update(self.store.load_intro_draft(ContextKey(company, role)))
        return self.draft.text
