"""
Human Play Mode
================

Play a balloon-pop round interactively with the mouse.

Controls:
    - Click a balloon: Pop it
    - Space / Enter: Start the round (or retry after it ends)
    - C: Continue after a passing round
    - ESC: Back (quit)

Usage:
    python -m tools.play_human [--seed SEED] [--width WIDTH] [--height HEIGHT]
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
from typing import List, Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from balloon_pop.round_core.audio import NullAudio, PygameToneAudio
from balloon_pop.round_core.config_loader import load_config, GameConfig
from balloon_pop.round_core.game import RoundEngine
from balloon_pop.round_core.outcome import PASS_THRESHOLD
from balloon_pop.round_core.state import Phase
from balloon_pop.round_core.state_snapshot import BalloonView, RoundSnapshot


class BalloonRenderer:
    """
    Draws round snapshots: header with score/time/combo, the play field,
    the start prompt and the outcome screen.
    """

    def __init__(self, config: GameConfig, window_width: int, window_height: int):
        self._config = config
        self._window_width = window_width
        self._window_height = window_height

        # Colors
        self._bg_gradient_top = (219, 234, 254)
        self._bg_gradient_bottom = (191, 219, 254)
        self._field_border = (147, 197, 253)
        self._panel = (255, 255, 255)
        self._text_dark = (30, 41, 59)
        self._text_light = (71, 85, 105)
        self._combo_color = (147, 51, 234)
        self._gold = (255, 215, 0)
        self._silver = (192, 192, 192)

        pygame.font.init()
        self._font_huge = pygame.font.Font(None, 56)
        self._font_large = pygame.font.Font(None, 40)
        self._font_medium = pygame.font.Font(None, 28)
        self._font_small = pygame.font.Font(None, 22)

        self._bg_surface = self._create_gradient_background()
        self._calculate_layout()

    def _create_gradient_background(self) -> pygame.Surface:
        surface = pygame.Surface((self._window_width, self._window_height))
        for y in range(self._window_height):
            t = y / self._window_height
            r = int(self._bg_gradient_top[0] * (1-t) + self._bg_gradient_bottom[0] * t)
            g = int(self._bg_gradient_top[1] * (1-t) + self._bg_gradient_bottom[1] * t)
            b = int(self._bg_gradient_top[2] * (1-t) + self._bg_gradient_bottom[2] * t)
            pygame.draw.line(surface, (r, g, b), (0, y), (self._window_width, y))
        return surface

    def _calculate_layout(self) -> None:
        self._top_ui_height = 80
        self._bottom_ui_height = 40
        margin = 20
        self._field_rect = pygame.Rect(
            margin,
            self._top_ui_height,
            self._window_width - 2 * margin,
            self._window_height - self._top_ui_height - self._bottom_ui_height
        )

    def balloon_center(self, balloon: BalloonView) -> Tuple[int, int]:
        """Screen center of a balloon. ``x`` is the left edge, ``y`` the bottom edge."""
        field = self._field_rect
        radius = balloon.size / 2
        cx = field.left + balloon.x / 100.0 * field.width + radius
        cy = field.bottom - balloon.y / 100.0 * field.height - radius
        return int(cx), int(cy)

    def hit_test(self, snapshot: RoundSnapshot, pos: Tuple[int, int]) -> Optional[int]:
        """Id of the topmost balloon under ``pos``, if any."""
        if not self._field_rect.collidepoint(pos):
            return None
        # Later balloons are drawn on top
        for balloon in reversed(snapshot.balloons):
            cx, cy = self.balloon_center(balloon)
            if math.hypot(pos[0] - cx, pos[1] - cy) <= balloon.size / 2:
                return balloon.id
        return None

    def render(self, screen: pygame.Surface, snapshot: RoundSnapshot) -> None:
        screen.blit(self._bg_surface, (0, 0))

        if snapshot.phase is Phase.COMPLETED:
            self._draw_outcome(screen, snapshot)
            return

        self._draw_header(screen, snapshot)
        self._draw_field(screen, snapshot)

        if snapshot.phase is Phase.IDLE:
            self._draw_start_prompt(screen)

        hint = self._font_small.render(
            f"Score {PASS_THRESHOLD}+ points to complete the challenge!  (ESC: back)",
            True, self._text_light
        )
        screen.blit(hint, ((self._window_width - hint.get_width()) // 2,
                           self._window_height - self._bottom_ui_height + 12))

    def _draw_header(self, screen: pygame.Surface, snapshot: RoundSnapshot) -> None:
        score = self._font_large.render(f"Score: {snapshot.score}", True, self._text_dark)
        screen.blit(score, (20, 15))

        if snapshot.combo > 0:
            combo = self._font_medium.render(f"Combo x{snapshot.combo}!", True, self._combo_color)
            screen.blit(combo, (20, 50))

        time_text = self._font_large.render(f"Time: {snapshot.time_remaining}s", True, self._text_dark)
        screen.blit(time_text, (self._window_width - time_text.get_width() - 20, 15))

    def _draw_field(self, screen: pygame.Surface, snapshot: RoundSnapshot) -> None:
        field = self._field_rect
        pygame.draw.rect(screen, self._field_border, field, 4, border_radius=16)

        previous_clip = screen.get_clip()
        screen.set_clip(field.inflate(-8, -8))
        for balloon in snapshot.balloons:
            self._draw_balloon(screen, balloon)
        screen.set_clip(previous_clip)

    def _draw_balloon(self, screen: pygame.Surface, balloon: BalloonView) -> None:
        cx, cy = self.balloon_center(balloon)
        radius = balloon.size // 2
        pygame.draw.circle(screen, balloon.color, (cx, cy), radius)

        kind = self._config.get_kind(balloon.kind)
        if kind.border_width:
            border = self._gold if balloon.kind == "special" else self._silver
            pygame.draw.circle(screen, border, (cx, cy), radius, kind.border_width)

        if balloon.kind == "special":
            self._draw_crown(screen, cx, cy, 12)
        elif balloon.kind == "bonus":
            self._draw_star(screen, cx, cy, 10)
        else:
            self._draw_heart(screen, cx, cy, 7)

    def _draw_crown(self, screen: pygame.Surface, cx: int, cy: int, s: int) -> None:
        points = [
            (cx - s, cy + s // 2), (cx - s, cy - s // 2), (cx - s // 2, cy),
            (cx, cy - s), (cx + s // 2, cy), (cx + s, cy - s // 2), (cx + s, cy + s // 2)
        ]
        pygame.draw.polygon(screen, (255, 255, 255), points)

    def _draw_star(self, screen: pygame.Surface, cx: int, cy: int, s: int) -> None:
        points: List[Tuple[float, float]] = []
        for i in range(10):
            r = s if i % 2 == 0 else s * 0.45
            a = -math.pi / 2 + i * math.pi / 5
            points.append((cx + r * math.cos(a), cy + r * math.sin(a)))
        pygame.draw.polygon(screen, (255, 255, 255), points)

    def _draw_heart(self, screen: pygame.Surface, cx: int, cy: int, s: int) -> None:
        white = (255, 255, 255)
        pygame.draw.circle(screen, white, (cx - s // 2, cy - s // 3), s // 2 + 1)
        pygame.draw.circle(screen, white, (cx + s // 2, cy - s // 3), s // 2 + 1)
        pygame.draw.polygon(screen, white, [(cx - s, cy - s // 4), (cx + s, cy - s // 4), (cx, cy + s)])

    def _draw_start_prompt(self, screen: pygame.Surface) -> None:
        lines = [
            (self._font_large, "Pop balloons to score points!", self._text_dark),
            (self._font_small, "Normal (10pts) - Bonus (25pts) - Special (50pts)", self._text_light),
            (self._font_small, "Pop balloons quickly for combo bonuses!", self._text_light),
            (self._font_medium, "Click or press SPACE to start", self._combo_color),
        ]
        y = self._field_rect.centery - 60
        for font, text, color in lines:
            surface = font.render(text, True, color)
            screen.blit(surface, ((self._window_width - surface.get_width()) // 2, y))
            y += surface.get_height() + 12

    def _draw_outcome(self, screen: pygame.Surface, snapshot: RoundSnapshot) -> None:
        outcome = snapshot.outcome
        cx = self._window_width // 2

        panel = pygame.Rect(0, 0, self._window_width - 60, 360)
        panel.center = (cx, self._window_height // 2)
        pygame.draw.rect(screen, self._panel, panel, border_radius=24)

        title_color = self._gold if outcome.rating.crown else self._combo_color
        title = self._font_huge.render(outcome.label, True, title_color)
        screen.blit(title, (cx - title.get_width() // 2, panel.top + 40))

        score = self._font_large.render(f"Final Score: {outcome.score}", True, self._text_dark)
        screen.blit(score, (cx - score.get_width() // 2, panel.top + 110))

        y = panel.top + 170
        for line in _wrap(outcome.message, 48):
            text = self._font_small.render(line, True, self._text_light)
            screen.blit(text, (cx - text.get_width() // 2, y))
            y += text.get_height() + 6

        action = "Press C to complete the journey" if outcome.can_continue else "Press SPACE to try again"
        prompt = self._font_medium.render(action, True, self._combo_color)
        screen.blit(prompt, (cx - prompt.get_width() // 2, panel.bottom - 60))


def _wrap(text: str, width: int) -> List[str]:
    lines: List[str] = []
    current = ""
    for word in text.split():
        if current and len(current) + 1 + len(word) > width:
            lines.append(current)
            current = word
        else:
            current = f"{current} {word}".strip()
    if current:
        lines.append(current)
    return lines


class HumanPlayer:
    """Interactive game loop around a RoundEngine."""

    def __init__(
        self,
        config: GameConfig,
        seed: Optional[int] = None,
        window_width: int = 640,
        window_height: int = 640,
        target_fps: int = 60,
        mute: bool = False
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for human play mode. Install with: pip install pygame")

        pygame.init()
        self._screen = pygame.display.set_mode((window_width, window_height))
        pygame.display.set_caption("Royal Balloon Challenge")
        self._clock = pygame.time.Clock()
        self._target_fps = target_fps
        self._seed = seed

        audio = NullAudio() if mute else PygameToneAudio(config)
        self._engine = RoundEngine(
            config=config,
            seed=seed,
            audio=audio,
            time_source=pygame.time.get_ticks,
            on_complete=self._on_complete,
            on_back=self._on_back
        )
        self._renderer = BalloonRenderer(config, window_width, window_height)

        self._snapshot: RoundSnapshot = self._engine.snapshot()
        self._unsubscribe = self._engine.subscribe(self._on_snapshot)
        self._running = True
        self._passed = False

    def _on_snapshot(self, snapshot: RoundSnapshot) -> None:
        previous = self._snapshot
        self._snapshot = snapshot
        if snapshot.score > previous.score and snapshot.phase is Phase.ACTIVE:
            print(f"  +{snapshot.score - previous.score} (Total: {snapshot.score})")
        if snapshot.phase is Phase.COMPLETED and previous.phase is not Phase.COMPLETED:
            print(f"\nTIME UP - Score: {snapshot.score} ({snapshot.outcome.label})")

    def _on_complete(self) -> None:
        self._passed = True
        self._running = False

    def _on_back(self) -> None:
        self._running = False

    def run(self) -> int:
        """Run the game loop. Returns final score."""
        print("=== Royal Balloon Challenge ===")
        print("Click balloons to pop them, quick pops build combos")
        print("SPACE to start, C to continue, ESC to go back")
        print()

        while self._running:
            dt = self._clock.tick(self._target_fps) / 1000.0
            self._handle_events()
            if not self._running:
                break
            self._engine.update(dt)
            self._renderer.render(self._screen, self._snapshot)
            pygame.display.flip()

        score = self._engine.score
        self._unsubscribe()
        self._engine.close()
        pygame.quit()
        return score

    @property
    def passed(self) -> bool:
        return self._passed

    def _start(self) -> None:
        if self._engine.phase is Phase.COMPLETED:
            print("\n=== Round Restarted ===\n")
        self._engine.start()

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._engine.back()

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._engine.back()
                elif event.key in (pygame.K_SPACE, pygame.K_RETURN):
                    if self._engine.phase is not Phase.ACTIVE:
                        self._start()
                elif event.key == pygame.K_c:
                    self._engine.complete()

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if self._engine.phase is Phase.IDLE:
                    self._start()
                elif self._engine.phase is Phase.ACTIVE:
                    balloon_id = self._renderer.hit_test(self._snapshot, event.pos)
                    if balloon_id is not None:
                        self._engine.tap(balloon_id)


def main():
    parser = argparse.ArgumentParser(description="Play the balloon-pop round interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--width", type=int, default=640, help="Window width (default: 640)")
    parser.add_argument("--height", type=int, default=640, help="Window height (default: 640)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--mute", action="store_true", help="Disable pop tones")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level")

    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper())

    try:
        config = load_config()
        player = HumanPlayer(
            config=config,
            seed=args.seed,
            window_width=args.width,
            window_height=args.height,
            target_fps=args.fps,
            mute=args.mute
        )
        score = player.run()
        print(f"\nFinal Score: {score}")
        return 0
    except ImportError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
