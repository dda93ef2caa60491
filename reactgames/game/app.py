from __future__ import annotations

import logging

import pygame

from reactgames.config.settings import RunConfig, WindowConfig
from reactgames.data.logger import JsonlLogger
from reactgames.data.models import FeedbackCategory, SessionData, TrialResult
from reactgames.game.input import InputManager
from reactgames.game.renderer import Renderer
from reactgames.game.runner import TrialRunner
from reactgames.game.scheduler import Scheduler
from reactgames.game.scoring import feedback_color, feedback_text
from reactgames.game.session import SessionAggregator
from reactgames.game.session_metrics import SessionSummary
from reactgames.game.variants import GameVariant

logger = logging.getLogger(__name__)


class GameApp:
    def __init__(
        self,
        window: WindowConfig,
        run_config: RunConfig,
        data: SessionData,
        variant: GameVariant,
    ) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode((window.width, window.height))
        pygame.display.set_caption(variant.title)
        self.clock = pygame.time.Clock()
        self.renderer = Renderer(self.screen)
        self.window = window
        self.run_config = run_config
        self.variant = variant

        self.aggregator = SessionAggregator(
            data,
            events_logger=JsonlLogger(run_config.output_path(run_config.events_file)),
            sessions_logger=JsonlLogger(run_config.output_path(run_config.sessions_file)),
        )
        self.scheduler = Scheduler(now_ms=pygame.time.get_ticks())
        self.runner = TrialRunner(
            self.aggregator.trials,
            data.config,
            variant.scorer,
            scheduler=self.scheduler,
            on_result=self._handle_result,
        )
        self.input = InputManager(self.runner)

        self.running = True
        self.started = False
        self.summary: SessionSummary | None = None
        self.finished_at_ms: int | None = None
        self.last_feedback_ms: int = 0
        self.last_feedback_text: str = ""
        self.last_feedback_color = (230, 230, 230)

    def run(self) -> SessionSummary | None:
        while self.running:
            self.clock.tick(self.run_config.fps)
            now_ms = pygame.time.get_ticks()

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    self.running = False
                elif not self.started:
                    if event.type == pygame.KEYDOWN and event.key == pygame.K_RETURN:
                        self.started = True
                        logger.info(f"Starting {self.variant.name} session {self.aggregator.session_id}")
                        self.runner.start(now_ms)
                else:
                    self.input.process_pygame_event(event, now_ms)

            if self.started:
                self.runner.update(now_ms)
                if self.runner.is_finished() and self.finished_at_ms is None:
                    self.finished_at_ms = now_ms
                    self.summary = self._finalize_session()

            self._render(now_ms)

            if self.finished_at_ms is not None and now_ms - self.finished_at_ms > 3000:
                self.running = False

        if self.summary is None and self.started:
            self.summary = self._finalize_session()
        pygame.quit()
        return self.summary

    def _handle_result(self, result: TrialResult, category: FeedbackCategory) -> None:
        self.aggregator.add_result(result)
        self.last_feedback_ms = self.scheduler.now_ms
        self.last_feedback_text = feedback_text(category)
        self.last_feedback_color = feedback_color(category)

    def _finalize_session(self) -> SessionSummary:
        log_path = self.run_config.output_path(f"{self.aggregator.session_id}_{self.variant.name}.xml")
        return self.aggregator.finish(log_path)

    def _render(self, now_ms: int) -> None:
        self.renderer.clear()
        total = len(self.aggregator.trials)

        if not self.started:
            self.renderer.draw_instructions(self.variant.instructions)
            self.renderer.draw_feedback("Press Enter to start", self.renderer.ui_color)
        elif self.summary is not None:
            s = self.summary
            self.renderer.draw_finished(
                f"{s.successes}/{s.total_trials} hits, mean RT {s.mean_response_time:.3f}s"
            )
        else:
            self.renderer.draw_instructions(self.variant.instructions)
            if self.variant.sided:
                self.renderer.draw_line()
            trial = self.runner.current_trial
            if trial is not None and self.runner.stimulus_visible:
                self.renderer.draw_stimulus(trial)
            self.renderer.draw_hud(
                progress=(min(self.runner.current_index + 1, total), total),
                successes=sum(1 for r in self.aggregator.results if r.success),
            )
            if now_ms - self.last_feedback_ms <= self.run_config.feedback_ms:
                self.renderer.draw_feedback(self.last_feedback_text, self.last_feedback_color)

        self.renderer.present()
