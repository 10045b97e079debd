"""Quote form session.

A single in-memory session holding the current input, attachments, result
and status flags, with one transition method per user event. Nothing is
persisted; a new session starts from scratch.
"""

from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Sequence

import structlog

from smartquote.config.errors import QuoteError, SessionBusyError
from smartquote.models.project_input import ProjectInput
from smartquote.models.quote import QuoteResponse
from smartquote.models.uploaded_file import UploadedFile
from smartquote.services.file_ingestion import FileBatch, PathLike
from smartquote.services.quote_service import generate_quote

logger = structlog.get_logger(__name__)

DEFAULT_ERROR_MESSAGE = "Error generating the quote. Check your API key or try again."

QuoteGenerator = Callable[[ProjectInput, Sequence[UploadedFile]], Awaitable[QuoteResponse]]


class SessionState(str, Enum):
    """Where the session is in the submit/result cycle."""

    IDLE = "idle"
    LOADING = "loading"
    RESULT_SHOWN = "result-shown"
    IDLE_WITH_PRIOR_RESULT = "idle-with-prior-result"
    ERROR_SHOWN = "error-shown"


class QuoteSession:
    """Form session for one user.

    Args:
        project: Initial form values (defaults to the form defaults).
        generator: Coroutine producing a QuoteResponse; defaults to
            ``generate_quote`` with the configured LLM.
    """

    def __init__(
        self,
        project: Optional[ProjectInput] = None,
        generator: Optional[QuoteGenerator] = None,
    ):
        self.project = project or ProjectInput()
        self.attachments = FileBatch()
        self.result: Optional[QuoteResponse] = None
        self.error: Optional[str] = None
        self.loading = False
        self.editing = True
        self.state = SessionState.IDLE
        self._generator = generator or generate_quote

    # ------------------------------------------------------------------
    # Form events
    # ------------------------------------------------------------------

    @property
    def files(self) -> List[UploadedFile]:
        return self.attachments.files

    @property
    def can_submit(self) -> bool:
        return not self.loading

    def update_input(self, **fields: Any) -> ProjectInput:
        """Edit form fields by attribute name (e.g. ``team_size="3"``)."""
        self._ensure_not_loading()
        unknown = set(fields) - set(ProjectInput.model_fields)
        if unknown:
            raise AttributeError(f"Unknown form fields: {', '.join(sorted(unknown))}")
        self.project = self.project.model_copy(update=fields)
        return self.project

    def add_files(self, files: Iterable[UploadedFile]) -> None:
        """Append a finished batch of files to the attachment list."""
        self.attachments.add(files)

    async def add_paths(self, paths: Iterable[PathLike]) -> List[UploadedFile]:
        """Read files from disk and append them once the batch completes."""
        return await self.attachments.add_paths(paths)

    def remove_file(self, index: int) -> UploadedFile:
        """Remove the i-th attachment."""
        return self.attachments.remove(index)

    def toggle_edit(self) -> SessionState:
        """Show the form again over a prior result, or hide it again."""
        self._ensure_not_loading()
        if self.state == SessionState.RESULT_SHOWN:
            self.editing = True
            self.state = SessionState.IDLE_WITH_PRIOR_RESULT
        elif self.state == SessionState.IDLE_WITH_PRIOR_RESULT and self.result is not None:
            self.editing = False
            self.state = SessionState.RESULT_SHOWN
        else:
            self.editing = True
        return self.state

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def submit(self) -> SessionState:
        """Submit the form and wait for the generator.

        Ends in exactly one of ``result-shown`` or ``error-shown``.

        Raises:
            SessionBusyError: If a submission is already in flight.
            ValidationError: If required fields are missing; state unchanged.
        """
        self._ensure_not_loading()
        self.project.validate_for_submission()

        previous = self.state
        self.loading = True
        self.error = None
        self.result = None
        self.state = SessionState.LOADING
        logger.info("session_submitted", previous_state=previous.value, files=len(self.attachments))

        try:
            quote = await self._generator(self.project, self.attachments.files)
        except Exception as e:
            message = e.message if isinstance(e, QuoteError) else str(e)
            self.error = message or DEFAULT_ERROR_MESSAGE
            self.state = SessionState.ERROR_SHOWN
            logger.error(
                "session_quote_failed",
                error=self.error,
                error_type=type(e).__name__,
                code=getattr(e, "code", None),
            )
        else:
            self.result = quote
            self.editing = False
            self.state = SessionState.RESULT_SHOWN
            logger.info("session_quote_shown", total=quote.total_estimated_cost)
        finally:
            self.loading = False

        return self.state

    def _ensure_not_loading(self) -> None:
        if self.loading:
            raise SessionBusyError()
