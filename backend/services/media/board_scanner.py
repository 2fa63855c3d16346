"""
Board content description from a captured video frame.
"""
import logging
from typing import Optional

from core.llm_client import llm, LLMClient
from core.prompt_manager import prompt_manager
from core.config import VISION_MODEL, VISION_MAX_TOKENS

logger = logging.getLogger(__name__)


class BoardScanner:
    """Turns a frame of the lecture video into text usable as question context."""

    def __init__(self, client: Optional[LLMClient] = None, model_name: str = VISION_MODEL):
        self.client = client or llm
        self.model_name = model_name

    def describe(self, image: str) -> str:
        """
        Describe formulas, diagrams and text on the board.

        Args:
            image: Image URL or base64 data URL (data:image/jpeg;base64,...)

        Returns:
            Description text (may be empty)
        """
        if not image or not image.strip():
            raise ValueError("No image provided")

        description = self.client.analyze_image(
            prompt_manager.get_prompt("board_scan"),
            image.strip(),
            model=self.model_name,
            max_tokens=VISION_MAX_TOKENS,
        )
        logger.info(f"Board scan description: {description[:100]}...")
        return description


# Global board scanner instance
board_scanner = BoardScanner()
