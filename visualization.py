# visualization.py
"""
Optional Pygame preview of the particle engine.

The preview is a pure consumer: it reads the live particle records and the
current outline and never changes either. It stands in for the GPU
renderer during development.
"""
import logging
import pygame
import numpy as np
from typing import Optional, Tuple

from collision import Outline
from constants import BACKGROUND_COLOR, FPS, MOTION_BLUR_ALPHA, OUTLINE_COLOR

# Forward reference for type hinting to avoid circular import
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from simulation import ParticleSystem


# --- Data Contracts ---
#
# class Visualizer:
#   - draw(self, system: ParticleSystem, outline: Optional[Outline]) -> bool:
#     - Outputs:
#       - bool: False if the user has quit, True otherwise.
#     - Side Effects: Renders particles and the outline, handles Pygame
#       events. Does not modify the system or the outline.

class Visualizer:
    """
    Draws particles as filled circles over a fading background.
    """
    def __init__(self, window_size: Tuple[int, int]):
        pygame.init()
        self.width, self.height = int(window_size[0]), int(window_size[1])
        self.screen = pygame.display.set_mode((self.width, self.height))
        pygame.display.set_caption("Particle Engine Preview")
        self.clock = pygame.time.Clock()

        # Blitted over the previous frame each tick to leave fading trails.
        self.blur_surface = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
        self.blur_surface.fill((*BACKGROUND_COLOR, MOTION_BLUR_ALPHA))
        self.screen.fill(BACKGROUND_COLOR)

        logging.info(f"Visualizer initialized with Pygame display ({self.width}x{self.height}).")

    def _handle_events(self) -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down visualizer.")
                return False
        return True

    def _draw_outline(self, outline: Outline):
        if len(outline) < 2:
            return
        points = [(int(x), int(y)) for x, y in outline.starts]
        pygame.draw.polygon(self.screen, OUTLINE_COLOR, points, 2)
        cx, cy = outline.centroid()
        pygame.draw.circle(self.screen, OUTLINE_COLOR, (int(cx), int(cy)), 4)

    def draw(self, system: "ParticleSystem", outline: Optional[Outline] = None) -> bool:
        if not self._handle_events():
            return False

        self.screen.blit(self.blur_surface, (0, 0))

        particles = system.particles
        colors = np.clip(particles['color'][:, :3] * 255.0, 0, 255).astype(np.int32)
        for pos, size, color in zip(particles['position'], particles['size'], colors):
            pygame.draw.circle(
                self.screen,
                (int(color[0]), int(color[1]), int(color[2])),
                (int(pos[0]), int(pos[1])),
                max(1, int(size)),
            )

        if outline is not None:
            self._draw_outline(outline)

        pygame.display.flip()
        self.clock.tick(FPS)
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.quit()
