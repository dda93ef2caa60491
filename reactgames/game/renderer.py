from __future__ import annotations

import pygame

from reactgames.data.models import Side, TrialConfig


class Renderer:
    """
    Drawing only. Gets told what is visible and draws it; timing and
    scoring live in the runner.
    """

    def __init__(self, screen: pygame.Surface):
        self.screen = screen
        self.w, self.h = screen.get_size()

        self.font_big = pygame.font.SysFont(None, 72)
        self.font_mid = pygame.font.SysFont(None, 42)
        self.font_small = pygame.font.SysFont(None, 28)

        self.center = (self.w // 2, self.h // 2)
        self.square_size = min(self.w, self.h) // 6
        self.line_width = 6

        self.bg_color = (15, 15, 20)
        self.ui_color = (230, 230, 230)
        self.stimulus_color = (70, 120, 240)
        self.line_color = (240, 210, 60)

    def clear(self) -> None:
        self.screen.fill(self.bg_color)

    def present(self) -> None:
        pygame.display.flip()

    def draw_instructions(self, text: str) -> None:
        surf = self.font_small.render(text, True, self.ui_color)
        rect = surf.get_rect(center=(self.center[0], self.h * 0.12))
        self.screen.blit(surf, rect)

    def draw_hud(self, progress: tuple[int, int], successes: int) -> None:
        cur, total = progress
        left = self.font_small.render(f"Trial: {cur}/{total}", True, self.ui_color)
        right = self.font_small.render(f"Hits: {successes}", True, self.ui_color)
        self.screen.blit(left, (20, self.h - 40))
        self.screen.blit(right, (self.w - right.get_width() - 20, self.h - 40))

    def draw_line(self) -> None:
        x = self.center[0]
        top = int(self.h * 0.25)
        bottom = int(self.h * 0.75)
        pygame.draw.line(self.screen, self.line_color, (x, top), (x, bottom), self.line_width)

    def draw_stimulus(self, trial: TrialConfig) -> None:
        rect = pygame.Rect(0, 0, self.square_size, self.square_size)
        offset = self.square_size
        if trial.side == Side.LEFT:
            rect.center = (self.center[0] - offset, self.center[1])
        elif trial.side == Side.RIGHT:
            rect.center = (self.center[0] + offset, self.center[1])
        else:
            rect.center = self.center
        pygame.draw.rect(self.screen, self.stimulus_color, rect)

    def draw_feedback(self, message: str | None, color: tuple[int, int, int]) -> None:
        if not message:
            return
        surf = self.font_mid.render(message, True, color)
        rect = surf.get_rect(center=(self.center[0], self.h * 0.85))
        self.screen.blit(surf, rect)

    def draw_finished(self, summary_line: str) -> None:
        title = self.font_big.render("FINISHED!", True, self.ui_color)
        self.screen.blit(title, title.get_rect(center=self.center))
        line = self.font_small.render(summary_line, True, self.ui_color)
        self.screen.blit(line, line.get_rect(center=(self.center[0], self.center[1] + 60)))
