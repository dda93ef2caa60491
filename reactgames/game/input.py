from __future__ import annotations

import pygame

from reactgames.game.scoring import ACTION_LEFT, ACTION_RIGHT, ACTION_SPACE


# pygame key code -> our action names.
# Change the layout here; the scorers only know the action names.
KEY_TO_ACTION = {
    pygame.K_SPACE: ACTION_SPACE,
    pygame.K_f: ACTION_LEFT,
    pygame.K_a: ACTION_LEFT,
    pygame.K_LEFT: ACTION_LEFT,
    pygame.K_j: ACTION_RIGHT,
    pygame.K_o: ACTION_RIGHT,
    pygame.K_RIGHT: ACTION_RIGHT,
}
LEFT_CHARS = {"f", "a", "а"}  # latin / cyrillic layouts
RIGHT_CHARS = {"j", "o", "о"}


def read_action(event: pygame.event.Event) -> str | None:
    """
    Returns "SPACE" / "LEFT" / "RIGHT" for a key press, None for anything else.

    The key code is tried first. With a non-latin layout active the code of
    the physical F/J keys can differ, so the typed character is the fallback.
    """
    if event.type != pygame.KEYDOWN:
        return None
    action = KEY_TO_ACTION.get(event.key)
    if action is not None:
        return action
    char = (getattr(event, "unicode", "") or "").lower()
    if char in LEFT_CHARS:
        return ACTION_LEFT
    if char in RIGHT_CHARS:
        return ACTION_RIGHT
    if char == " ":
        return ACTION_SPACE
    return None


class InputManager:
    """
    InputManager sits between pygame and the trial runner.

    The idea:
    - pygame sends events every frame
    - only KEYDOWN is looked at
    - a mapped key becomes an action ("SPACE" / "LEFT" / "RIGHT")
    - the action is posted to the runner together with the frame time

    Unlike a poll-every-frame input, nothing is held here between frames.
    Whether a press counts (stimulus visible, first press of the trial,
    action accepted by the game) is the runner's call.
    """

    def __init__(self, runner) -> None:
        self.runner = runner
        # Only for display / debugging, the runner keeps its own queue
        self.last_action: str | None = None

    def process_pygame_event(self, event: pygame.event.Event, now_ms: int) -> bool:
        """
        Feed pygame events here from the main loop.

        Returns True when the event was a game key and was forwarded.
        """
        action = read_action(event)
        if action is None:
            return False
        self.last_action = action
        # now_ms is the frame time the event was read at; response time is
        # measured against it, so it is only as precise as the frame rate
        self.runner.post_response(action, now_ms)
        return True
