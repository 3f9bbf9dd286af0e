"""Yes/no confirmation collaborators.

The orchestrator never prompts; callers obtain confirmation before asking
it to delete.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from installment_plan.models.results import MutationResult
from installment_plan.orchestrator import SequenceOrchestrator
from installment_plan.validation import can_delete_with_redistribution


class ConfirmationPrompt(ABC):
    @abstractmethod
    def confirm(self, message: str) -> bool:
        ...


class AutoConfirm(ConfirmationPrompt):
    """Answers every prompt the same way; records what was asked."""

    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.messages: list[str] = []

    def confirm(self, message: str) -> bool:
        self.messages.append(message)
        return self.answer


class ConsolePrompt(ConfirmationPrompt):
    """Asks on the terminal; anything other than y/yes is a no."""

    def __init__(self, input_func: Callable[[str], str] = input) -> None:
        self._input = input_func

    def confirm(self, message: str) -> bool:
        answer = self._input(f"{message} [y/N] ")
        return answer.strip().lower() in ("y", "yes")


def confirm_and_delete(
    orchestrator: SequenceOrchestrator,
    installment_id: str,
    prompt: ConfirmationPrompt,
) -> MutationResult | None:
    """Ask before deleting; ``None`` when the user declines.

    A delete the gate would reject is returned as a rejection without
    prompting.
    """
    index = orchestrator.index_of(installment_id)
    if index is None:
        return orchestrator.delete(installment_id)

    result = can_delete_with_redistribution(index, orchestrator.installments)
    if not result:
        return orchestrator.delete(installment_id)

    installment = orchestrator.installments[index]
    message = f'Delete "{installment.title}"? Its amount will be moved to another installment.'
    if not prompt.confirm(message):
        return None
    return orchestrator.delete(installment_id)
