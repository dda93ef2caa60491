import pygame
import pytest

from reactgames.game.input import InputManager, read_action
from reactgames.game.scoring import ACTION_LEFT, ACTION_RIGHT, ACTION_SPACE


def keydown(key, unicode=""):
    return pygame.event.Event(pygame.KEYDOWN, key=key, unicode=unicode)


class RecordingRunner:
    def __init__(self):
        self.posted = []

    def post_response(self, action, now_ms):
        self.posted.append((action, now_ms))


@pytest.mark.parametrize(
    "key, expected",
    [
        (pygame.K_SPACE, ACTION_SPACE),
        (pygame.K_f, ACTION_LEFT),
        (pygame.K_LEFT, ACTION_LEFT),
        (pygame.K_j, ACTION_RIGHT),
        (pygame.K_RIGHT, ACTION_RIGHT),
        (pygame.K_q, None),
    ],
)
def test_key_mapping(key, expected):
    assert read_action(keydown(key)) == expected


def test_cyrillic_layout_characters():
    assert read_action(keydown(pygame.K_UNKNOWN, unicode="а")) == ACTION_LEFT
    assert read_action(keydown(pygame.K_UNKNOWN, unicode="о")) == ACTION_RIGHT


def test_only_keydown_counts():
    event = pygame.event.Event(pygame.KEYUP, key=pygame.K_SPACE, unicode=" ")
    assert read_action(event) is None


def test_input_manager_forwards_presses_with_time():
    runner = RecordingRunner()
    manager = InputManager(runner)
    assert manager.process_pygame_event(keydown(pygame.K_SPACE, " "), 1234) is True
    assert manager.process_pygame_event(keydown(pygame.K_q, "q"), 1300) is False
    assert runner.posted == [(ACTION_SPACE, 1234)]
    assert manager.last_action == ACTION_SPACE
