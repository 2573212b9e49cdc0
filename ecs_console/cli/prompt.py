"""Interactive service selection."""
import sys
from typing import Callable, List, Optional, TextIO

from ecs_console.environment.domains.errors import Aborted


def filter_choices(choices: List[str], text: str) -> List[str]:
    """Choices containing `text`, case-insensitive."""
    needle = text.lower()
    return [c for c in choices if needle in c.lower()]


def select_service(
    services: List[str],
    input_fn: Optional[Callable[[str], str]] = None,
    out: Optional[TextIO] = None,
) -> str:
    """
    Ask the operator to pick a service.

    Answer with the number of an entry, or type text to narrow the list;
    text matching exactly one service selects it. An empty answer shows the
    full list again.

    Raises:
        Aborted: If stdin is closed
    """
    input_fn = input_fn or input
    out = out or sys.stdout
    shown = list(services)
    while True:
        print("Select service", file=out)
        for index, name in enumerate(shown, start=1):
            print(f"  {index}. {name}", file=out)

        try:
            answer = input_fn("Enter number or filter: ").strip()
        except EOFError:
            raise Aborted()

        if not answer:
            shown = list(services)
            continue

        if answer.isdigit():
            index = int(answer)
            if 1 <= index <= len(shown):
                return shown[index - 1]
            print(f"Invalid choice: {answer}", file=out)
            continue

        if answer in services:
            return answer

        matches = filter_choices(services, answer)
        if len(matches) == 1:
            return matches[0]
        if not matches:
            print(f"No services match '{answer}'", file=out)
            shown = list(services)
        else:
            shown = matches
