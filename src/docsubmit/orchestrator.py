"""Submission orchestrator — the idle → processing → success/error state machine.

One state value is current at any time and every transition replaces it.
Each external call is tagged with the generation that dispatched it; a
result is applied only while that generation is still the live one, so a
reset (or a newer attempt) silently supersedes anything still in flight.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from docsubmit import staging
from docsubmit.client import SubmissionClient
from docsubmit.config import Settings, get_settings
from docsubmit.events import EventBus, EventListener, LifecycleEvent
from docsubmit.exceptions import OrchestratorStateError
from docsubmit.identity import (
    AuthenticatedIdentity,
    IdentityStrategy,
    ManualEmailIdentity,
    recipient_email,
)
from docsubmit.jurisdictions import JurisdictionDirectory, get_directory
from docsubmit.models.enums import LifecycleEventType, ProcessingPhase, SubmissionStatus
from docsubmit.progress import ProgressSimulator
from docsubmit.schemas.files import StagedFile, SubmissionRequest
from docsubmit.schemas.principal import Principal
from docsubmit.schemas.state import (
    ErrorState,
    IdleState,
    ProcessingState,
    SubmissionState,
    SuccessState,
)
from docsubmit.validation import can_submit, validation_errors

logger = logging.getLogger(__name__)

FAILURE_REASON = "Submission failed. Please try again."


class SubmissionOrchestrator:
    def __init__(
        self,
        client: SubmissionClient,
        *,
        directory: JurisdictionDirectory | None = None,
        identity: IdentityStrategy | None = None,
        events: EventBus | None = None,
        settings: Settings | None = None,
    ):
        self._settings = settings or get_settings()
        self._client = client
        self.directory = directory or get_directory(self._settings.jurisdictions)
        self.identity = identity or ManualEmailIdentity()
        self.events = events or EventBus()

        self._generation = 0
        self._simulator: ProgressSimulator | None = None
        self._call: asyncio.Task | None = None
        self._state: SubmissionState = self._fresh_idle()

        self._unsubscribe_identity: Callable[[], None] | None = None
        if isinstance(self.identity, AuthenticatedIdentity):
            self._unsubscribe_identity = self.identity.provider.subscribe(
                self._on_principal_changed
            )

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def status(self) -> SubmissionStatus:
        return SubmissionStatus(self._state.status)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def progress_running(self) -> bool:
        return self._simulator is not None and self._simulator.running

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        return self.events.subscribe(listener)

    def can_submit(self) -> bool:
        state = self._state
        if not isinstance(state, IdleState):
            return False
        return can_submit(
            state.files,
            state.jurisdiction,
            self.identity.resolve(state.contact_email),
            self.directory,
        )

    def validation_errors(self) -> list[str]:
        state = self._state
        if not isinstance(state, IdleState):
            return [f"Cannot submit while {state.status}"]
        return validation_errors(
            state.files,
            state.jurisdiction,
            self.identity.resolve(state.contact_email),
            self.directory,
        )

    def _require_idle(self, action: str) -> IdleState:
        if not isinstance(self._state, IdleState):
            raise OrchestratorStateError(
                f"Cannot {action} while {self._state.status}"
            )
        return self._state

    def stage_files(self, candidates: Iterable[StagedFile]) -> tuple[StagedFile, ...]:
        state = self._require_idle("stage files")
        files = staging.add_files(
            state.files, candidates, self._settings.accepted_media_type,
        )
        self._state = state.model_copy(update={"files": files})
        return files

    def remove_file(self, index: int) -> tuple[StagedFile, ...]:
        state = self._require_idle("remove a file")
        files = staging.remove_file(state.files, index)
        self._state = state.model_copy(update={"files": files})
        return files

    def clear_files(self) -> tuple[StagedFile, ...]:
        state = self._require_idle("clear files")
        files = staging.clear_files()
        self._state = state.model_copy(update={"files": files})
        return files

    def load_demo(self, path: str | Path) -> tuple[StagedFile, ...]:
        """Stage a bundled demo document; already-staged copies are left alone."""
        demo = staging.staged_file_from_path(path, self._settings.accepted_media_type)
        return self.stage_files([demo])

    def select_jurisdiction(self, name: str | None) -> None:
        state = self._require_idle("change jurisdiction")
        self._state = state.model_copy(update={"jurisdiction": name or None})

    def set_contact_email(self, text: str) -> None:
        state = self._require_idle("change contact email")
        self._state = state.model_copy(update={"contact_email": text})

    def submit(self) -> asyncio.Task | None:
        """Start a submission from Idle. Returns the in-flight call, or None if refused."""
        state = self._state
        if not isinstance(state, IdleState):
            logger.warning("Submit ignored while %s", state.status)
            return None

        identity = self.identity.resolve(state.contact_email)
        if not can_submit(state.files, state.jurisdiction, identity, self.directory):
            logger.info(
                "Submit refused: %s",
                "; ".join(validation_errors(
                    state.files, state.jurisdiction, identity, self.directory,
                )),
            )
            return None

        request = SubmissionRequest(
            files=state.files,
            jurisdiction=state.jurisdiction,
            contact_email=recipient_email(identity),
        )
        return self._dispatch(request)

    def retry(self) -> asyncio.Task | None:
        """Resend the retained request after a failure, unchanged."""
        state = self._state
        if not isinstance(state, ErrorState):
            logger.warning("Retry ignored while %s", state.status)
            return None
        return self._dispatch(state.request)

    def reset(self) -> None:
        """Return to a blank Idle from any state, superseding any in-flight call."""
        in_flight = self._call is not None and not self._call.done()
        self._generation += 1
        self._stop_simulator()
        self._call = None
        self._state = self._fresh_idle()
        if in_flight:
            logger.info("Reset during submission; generation now %d", self._generation)
        else:
            logger.info("Reset to idle")
        self._emit(LifecycleEventType.reset)

    async def wait(self) -> None:
        """Wait for the outstanding call (including its settle delay) to finish."""
        if self._call is not None:
            await self._call

    def close(self) -> None:
        if self._unsubscribe_identity is not None:
            self._unsubscribe_identity()
            self._unsubscribe_identity = None
        self._generation += 1
        self._stop_simulator()

    async def __aenter__(self) -> "SubmissionOrchestrator":
        return self

    async def aclose(self) -> None:
        """close(), then flush and release event sinks such as the Redis publisher."""
        self.close()
        await self.events.aclose()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def _fresh_idle(self) -> IdleState:
        default = self._settings.default_jurisdiction
        contact_email = ""
        if isinstance(self.identity, AuthenticatedIdentity):
            principal = self.identity.provider.current_principal()
            contact_email = principal.email if principal is not None else ""
        return IdleState(
            jurisdiction=default if default and default in self.directory else None,
            contact_email=contact_email,
        )

    def _dispatch(self, request: SubmissionRequest) -> asyncio.Task:
        loop = asyncio.get_running_loop()
        self._stop_simulator()
        self._generation += 1
        generation = self._generation
        total_steps = self._settings.base_steps + len(request.files)

        self._state = ProcessingState(
            request=request,
            generation=generation,
            total_steps=total_steps,
        )
        logger.info(
            "Submitting %d file(s) for %s (generation %d, %d steps)",
            len(request.files), request.jurisdiction, generation, total_steps,
        )

        self._simulator = ProgressSimulator(
            total_steps,
            self._settings.progress_interval_seconds,
            on_tick=lambda steps: self._on_tick(generation, steps),
        )
        self._simulator.start()

        call = loop.create_task(self._run_call(generation, request))
        self._call = call
        self._emit(LifecycleEventType.entered_processing)
        return call

    async def _run_call(self, generation: int, request: SubmissionRequest) -> None:
        if not self._is_current(generation):
            logger.info("Dropping superseded request for generation %d", generation)
            return
        self._update_processing(generation, phase=ProcessingPhase.awaiting_result)
        try:
            await self._client.submit(request)
        except Exception:
            logger.exception("Submission call failed (generation %d)", generation)
            await self._finish_failure(generation, request)
            return
        await self._finish_success(generation, request)

    async def _finish_success(self, generation: int, request: SubmissionRequest) -> None:
        if not self._is_current(generation):
            logger.info("Discarding stale success for generation %d", generation)
            return
        self._stop_simulator()
        total_steps = self._state.total_steps
        self._update_processing(
            generation,
            steps_completed=total_steps,
            phase=ProcessingPhase.completed,
        )
        self._emit(LifecycleEventType.progressed)

        if self._settings.success_settle_seconds > 0:
            await asyncio.sleep(self._settings.success_settle_seconds)
            if not self._is_current(generation):
                return

        self._state = SuccessState(
            file_names=request.file_names,
            jurisdiction=request.jurisdiction,
            contact_email=request.contact_email,
            steps_completed=total_steps,
            total_steps=total_steps,
        )
        logger.info("Submission succeeded (generation %d)", generation)
        self._emit(LifecycleEventType.succeeded)

    async def _finish_failure(self, generation: int, request: SubmissionRequest) -> None:
        if not self._is_current(generation):
            logger.info("Discarding stale failure for generation %d", generation)
            return
        self._stop_simulator()
        self._update_processing(generation, phase=ProcessingPhase.failed)

        if self._settings.failure_settle_seconds > 0:
            await asyncio.sleep(self._settings.failure_settle_seconds)
            if not self._is_current(generation):
                return

        self._state = ErrorState(request=request, reason=FAILURE_REASON)
        self._emit(LifecycleEventType.failed, reason=FAILURE_REASON)

    def _on_tick(self, generation: int, steps: int) -> None:
        if not self._is_current(generation):
            return
        state = self._state
        steps = min(steps, state.total_steps - 1)
        if steps <= state.steps_completed:
            return
        self._update_processing(generation, steps_completed=steps)
        self._emit(LifecycleEventType.progressed)

    def _on_principal_changed(self, principal: Principal | None) -> None:
        state = self._state
        if isinstance(state, IdleState):
            email = principal.email if principal is not None else ""
            self._state = state.model_copy(update={"contact_email": email})

    def _is_current(self, generation: int) -> bool:
        state = self._state
        return (
            generation == self._generation
            and isinstance(state, ProcessingState)
            and state.generation == generation
        )

    def _update_processing(self, generation: int, **changes) -> None:
        if self._is_current(generation):
            self._state = self._state.model_copy(update=changes)

    def _stop_simulator(self) -> None:
        if self._simulator is not None:
            self._simulator.stop()
            self._simulator = None

    def _emit(self, event_type: LifecycleEventType, reason: str | None = None) -> None:
        state = self._state
        detail: dict = {}
        if isinstance(state, ProcessingState):
            detail = {
                "steps_completed": state.steps_completed,
                "total_steps": state.total_steps,
                "file_names": list(state.request.file_names),
            }
        elif isinstance(state, SuccessState):
            detail = {
                "steps_completed": state.steps_completed,
                "total_steps": state.total_steps,
                "file_names": list(state.file_names),
            }
        elif isinstance(state, ErrorState):
            detail = {"file_names": list(state.request.file_names)}

        self.events.publish(LifecycleEvent(
            type=event_type,
            status=SubmissionStatus(state.status),
            generation=self._generation,
            reason=reason,
            **detail,
        ))
