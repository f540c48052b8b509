"""
Notification sound playback on top of pygame.mixer.

Without a configured file the alert is a short two-tone chime synthesised
with numpy.
"""

import logging
import os

import numpy as np
import pygame

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100


class SoundError(RuntimeError):
    """Audio subsystem or sound file could not be set up"""


def _create_tone(freq, duration):
    """Sine tone with a 10 ms fade in/out, as int16 stereo samples"""
    n = int(duration * SAMPLE_RATE)
    t = np.linspace(0, duration, n, False)
    wave = np.sin(freq * t * 2 * np.pi)

    fade = int(SAMPLE_RATE * 0.01)
    wave[:fade] *= np.linspace(0, 1, fade)
    wave[-fade:] *= np.linspace(1, 0, fade)

    audio = (wave * 32767 * 0.8).astype(np.int16)
    return np.repeat(audio.reshape(n, 1), 2, axis=1)


def chime_samples():
    """Built-in alert: A5 then A6, with a short gap"""
    gap = np.zeros((int(SAMPLE_RATE * 0.08), 2), dtype=np.int16)
    return np.concatenate([_create_tone(880, 0.25), gap, _create_tone(1760, 0.35)])


class SoundManager:
    """Owns the mixer and the single alert sound"""
    def __init__(self, path=None):
        self.path = path
        self.sound = None
        self._closed = False

        try:
            pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=2, buffer=512)
        except pygame.error as e:
            raise SoundError(f"audio init failed: {e}") from e

        try:
            self.sound = self._load()
        except SoundError:
            pygame.mixer.quit()
            raise

    def _load(self):
        if self.path is None:
            logger.debug("Using built-in chime")
            try:
                return pygame.sndarray.make_sound(chime_samples())
            except (pygame.error, ValueError) as e:
                raise SoundError(f"could not build built-in chime: {e}") from e

        if not os.path.isfile(self.path):
            raise SoundError(f"sound file not found: {self.path}")
        logger.debug("Loading sound %s", self.path)
        try:
            return pygame.mixer.Sound(self.path)
        except (pygame.error, OSError) as e:
            raise SoundError(f"could not load sound {self.path}: {e}") from e

    def play(self):
        """Play the alert once, without blocking"""
        if self.sound is not None and not self._closed:
            self.sound.play()

    def stop(self):
        if self.sound is not None and not self._closed:
            self.sound.stop()

    def close(self):
        """Release the mixer; errors are logged, never raised"""
        if self._closed:
            return
        self._closed = True
        if self.sound is not None:
            try:
                self.sound.stop()
            except pygame.error as e:
                logger.warning("Stopping sound failed: %s", e)
        try:
            pygame.mixer.quit()
        except pygame.error as e:
            logger.warning("Audio teardown failed: %s", e)
        self.sound = None
