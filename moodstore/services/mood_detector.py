"""
Mood detection from a camera snapshot.

A real deployment would call a computer vision API here; this one picks a
mood at random after a short delay so the UI flow can be exercised.
"""

import asyncio
import logging
import random
from typing import Optional

from ..models.product import MoodTag

logger = logging.getLogger(__name__)

DETECTABLE_MOODS = [
    MoodTag.HAPPY,
    MoodTag.TIRED,
    MoodTag.ENERGETIC,
    MoodTag.CHILL,
    MoodTag.FOCUSED,
    MoodTag.CELEBRATING,
]


class MoodDetector:
    """Simulated emotion detection"""

    def __init__(self, delay: float = 0.0, rng: Optional[random.Random] = None):
        self.delay = delay
        self._rng = rng or random.Random()

    async def detect(self, image: str) -> MoodTag:
        """Detect a mood from base64 image data"""
        if not image:
            raise ValueError("Image data is required")

        if self.delay > 0:
            await asyncio.sleep(self.delay)

        mood = self._rng.choice(DETECTABLE_MOODS)
        logger.info(f"Detected mood {mood.value} from {len(image)} bytes of image data")
        return mood
