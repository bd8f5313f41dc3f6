"""Step-wise conversation engine for the project creation wizard.

Each call to ConversationEngine.advance handles one turn:
- An empty context starts a new wizard and returns the welcome prompt
- Pre-dispatch interceptors handle the description-generation side path
  and the yes/no answer to a generated description, at any step
- Otherwise the handler for the current step validates the input and either
  re-prompts with an error or moves to the next step

The engine keeps no state between turns. It works on a copy of the supplied
context, so a turn that raises leaves the caller's context untouched.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from kickoff.agents.intent import IntentAnalyzer
from kickoff.agents.prompt_library import (
    RESTART_PROMPT_FILE,
    WELCOME_PROMPT_FILE,
    load_prompt,
    step_prompt,
)
from kickoff.models.conversation import ConversationContext, ValidationState, WizardStep
from kickoff.models.project import parse_priority
from kickoff.security import InputSanitizer
from kickoff.services.description_generator import DescriptionGenerator
from kickoff.services.project_validation import (
    FieldValidationError,
    validate_description,
    validate_project_record,
    validate_step,
)

logger = logging.getLogger(__name__)

ERROR_MARKER = "❌"
CREATE_PROJECT_ACTION = "create_project"

GENERATE_DESCRIPTION_TRIGGERS = ("generate description", "сгенерируй описание")
YES_ANSWERS = {"yes", "да"}
NO_ANSWERS = {"no", "нет"}
DONE_ANSWERS = {"done", "готово"}

NAME_HINT = "Please enter a valid project name."
DESCRIPTION_HINT = "Please enter a valid project description."
DEADLINE_HINT = "Please enter a valid date in DD.MM.YYYY format."
PRIORITY_ERROR = "Please choose one of: high, medium or low."
TEAM_NEXT_PROMPT = 'Enter the email of the next team member or type "done" to finish.'
YES_NO_PROMPT = 'Please answer "yes" or "no".'
DEADLINE_TOO_SOON_NOTE = "⚠️ Heads up: the deadline is less than a week away."


class EngineStateError(RuntimeError):
    """The context is in a state the engine has no handler for."""


@dataclass
class TurnResult:
    """Outcome of a single conversational turn."""
    reply: str
    context: ConversationContext
    suggested_action: str | None = None


StepHandler = Callable[[str, ConversationContext], TurnResult]


class ConversationEngine:
    """Finite-state dialogue controller for project creation."""

    def __init__(
        self,
        intent_analyzer: IntentAnalyzer | None = None,
        description_generator: DescriptionGenerator | None = None,
    ):
        self.intents = intent_analyzer or IntentAnalyzer()
        self.description_generator = description_generator or DescriptionGenerator()
        self._interceptors: list[Callable[[str, ConversationContext], TurnResult | None]] = [
            self._intercept_generation_request,
            self._intercept_pending_description,
        ]
        self._handlers: dict[WizardStep, StepHandler] = {
            WizardStep.NAME: self._handle_name,
            WizardStep.DESCRIPTION: self._handle_description,
            WizardStep.DEADLINE: self._handle_deadline,
            WizardStep.PRIORITY: self._handle_priority,
            WizardStep.TEAM: self._handle_team,
            WizardStep.CONFIRMATION: self._handle_confirmation,
            WizardStep.TERMINAL: self._handle_terminal,
        }

    def advance(self, message: str, context: ConversationContext | None) -> TurnResult:
        """Process one user message against the supplied context.

        Args:
            message: Raw user message
            context: Context returned by the previous turn, or None

        Returns:
            The assistant reply, the updated context and an optional action

        Raises:
            EngineStateError: If the current step has no handler
            GenerationError: If description generation fails
        """
        if context is None or context.is_new:
            return self._start()

        context = context.model_copy(deep=True)
        message = InputSanitizer.sanitize_message(message)
        logger.info(f"Handling step {context.current_step}")
        logger.debug(f"Message for step {context.current_step}: {message!r}")

        # A created project is closed, side paths must not edit it
        if context.current_step != WizardStep.TERMINAL:
            for interceptor in self._interceptors:
                result = interceptor(message, context)
                if result is not None:
                    return result

        handler = self._handlers.get(context.current_step)
        if handler is None:
            raise EngineStateError(f"Unknown wizard step: {context.current_step}")
        return handler(message, context)

    def _start(self) -> TurnResult:
        context = ConversationContext(current_step=WizardStep.NAME)
        logger.info("Starting new project wizard")
        return TurnResult(reply=load_prompt(WELCOME_PROMPT_FILE), context=context)

    # Interceptors

    def _intercept_generation_request(
        self, message: str, context: ConversationContext
    ) -> TurnResult | None:
        lowered = message.lower()
        if not any(trigger in lowered for trigger in GENERATE_DESCRIPTION_TRIGGERS):
            return None

        if InputSanitizer.detect_injection_attempt(message):
            logger.warning(f"Injection pattern in generation request at step {context.current_step}")
            return self._reject(
                context,
                "I can't generate a description from this text.",
                "Please describe the project in your own words.",
            )

        description = self.description_generator.suggest(message)
        context.pending_description = description
        return TurnResult(
            reply=(
                "✨ I generated the following description for your project:\n\n"
                f"{description}\n\n"
                'Do you want to use this description? Answer "yes" or "no".'
            ),
            context=context,
        )

    def _intercept_pending_description(
        self, message: str, context: ConversationContext
    ) -> TurnResult | None:
        if context.pending_description is None:
            return None

        answer = message.lower()
        if answer in YES_ANSWERS:
            candidate = context.pending_description
            context.pending_description = None
            try:
                validate_description(candidate)
            except FieldValidationError as exc:
                return self._reject(context, exc.message, DESCRIPTION_HINT, field=exc.field)

            context.project_data.description = candidate
            if context.current_step == WizardStep.DESCRIPTION:
                warnings = self.intents.analyze_context(candidate, WizardStep.DESCRIPTION)
                result = self._move_to(context, WizardStep.DEADLINE, warnings)
                result.reply = f"Description saved.\n\n{result.reply}"
                return result
            return TurnResult(
                reply=f"Description saved.\n\n{self._current_prompt(context)}",
                context=context,
            )

        if answer in NO_ANSWERS:
            context.pending_description = None
            return TurnResult(
                reply=(
                    "OK, I discarded the generated description.\n\n"
                    f"{self._current_prompt(context)}"
                ),
                context=context,
            )

        return TurnResult(
            reply=f"Do you want to use the generated description? {YES_NO_PROMPT}",
            context=context,
        )

    # Step handlers

    def _handle_name(self, message: str, context: ConversationContext) -> TurnResult:
        return self._handle_field_step(
            context, WizardStep.NAME, "name", message.strip(), WizardStep.DESCRIPTION, NAME_HINT
        )

    def _handle_description(self, message: str, context: ConversationContext) -> TurnResult:
        return self._handle_field_step(
            context,
            WizardStep.DESCRIPTION,
            "description",
            message.strip(),
            WizardStep.DEADLINE,
            DESCRIPTION_HINT,
        )

    def _handle_deadline(self, message: str, context: ConversationContext) -> TurnResult:
        deadline = self.intents.extract_date(message) or message.strip()
        result = self._handle_field_step(
            context, WizardStep.DEADLINE, "deadline", deadline, WizardStep.PRIORITY, DEADLINE_HINT
        )
        if result.context.validation_state.warnings.get("warning") == "too_soon":
            result.reply = f"{DEADLINE_TOO_SOON_NOTE}\n\n{result.reply}"
        return result

    def _handle_priority(self, message: str, context: ConversationContext) -> TurnResult:
        # Closed set of literals, keyword guesses are not accepted here
        priority = parse_priority(message)
        if priority is None:
            context.validation_state = ValidationState.from_results(
                {"priority": PRIORITY_ERROR}
            )
            return TurnResult(reply=f"{ERROR_MARKER} {PRIORITY_ERROR}", context=context)

        context.project_data.priority = priority.value
        return self._move_to(context, WizardStep.TEAM)

    def _handle_team(self, message: str, context: ConversationContext) -> TurnResult:
        if message.lower() in DONE_ANSWERS:
            try:
                validate_step(WizardStep.TEAM, context.project_data)
            except FieldValidationError as exc:
                return self._reject(context, f"{exc.field}: {exc.message}", TEAM_NEXT_PROMPT, field=exc.field)
            return self._move_to(context, WizardStep.CONFIRMATION)

        # TODO: resolve the email through the user directory once its lookup API is defined
        email = self.intents.extract_email(message)
        if email:
            logger.info(f"Team member addition requested for {email}")
        else:
            logger.debug("Team step input without an email address")
        return TurnResult(reply=TEAM_NEXT_PROMPT, context=context)

    def _handle_confirmation(self, message: str, context: ConversationContext) -> TurnResult:
        answer = message.lower()

        if answer in YES_ANSWERS:
            # Full re-validation, the record may have changed outside the step gates
            state = validate_project_record(context.project_data)
            context.validation_state = state
            if not state.is_valid:
                lines = "\n".join(f"- {field}: {error}" for field, error in state.errors.items())
                return TurnResult(
                    reply=(
                        f"{ERROR_MARKER} Found errors:\n{lines}\n\n"
                        'Please fix them and try again. Answer "no" to start over.'
                    ),
                    context=context,
                )

            logger.info(f"Project '{context.project_data.name}' is ready to be created")
            return TurnResult(
                reply="✅ Great! Creating the project...",
                context=context,
                suggested_action=CREATE_PROJECT_ACTION,
            )

        if answer in NO_ANSWERS:
            context.current_step = WizardStep.NAME
            context.validation_state = ValidationState()
            return TurnResult(reply=load_prompt(RESTART_PROMPT_FILE), context=context)

        return TurnResult(reply=YES_NO_PROMPT, context=context)

    def _handle_terminal(self, message: str, context: ConversationContext) -> TurnResult:
        return TurnResult(reply=self._current_prompt(context), context=context)

    # Helpers

    def _handle_field_step(
        self,
        context: ConversationContext,
        step: WizardStep,
        field: str,
        value: str,
        next_step: WizardStep,
        hint: str,
    ) -> TurnResult:
        """Validate a candidate value and commit it only if it passes."""
        candidate = context.project_data.model_copy(update={field: value})
        try:
            validate_step(step, candidate)
        except FieldValidationError as exc:
            return self._reject(context, exc.message, hint, field=exc.field)

        context.project_data = candidate
        warnings = self.intents.analyze_context(value, step)
        return self._move_to(context, next_step, warnings)

    def _move_to(
        self,
        context: ConversationContext,
        step: WizardStep,
        warnings: dict[str, str] | None = None,
    ) -> TurnResult:
        logger.info(f"Wizard step {context.current_step} -> {step}")
        context.current_step = step
        context.validation_state = ValidationState.from_results({}, warnings)
        return TurnResult(reply=self._current_prompt(context), context=context)

    def _reject(
        self,
        context: ConversationContext,
        error: str,
        hint: str,
        field: str = "message",
    ) -> TurnResult:
        context.validation_state = ValidationState.from_results({field: error})
        return TurnResult(reply=f"{ERROR_MARKER} {error}\n\n{hint}", context=context)

    def _current_prompt(self, context: ConversationContext) -> str:
        return step_prompt(context.current_step, context.project_data)
