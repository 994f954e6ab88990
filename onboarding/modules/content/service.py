from onboarding.config.settings import settings
from typing import Dict, List, Optional, Union
from fastapi import HTTPException
from pathlib import Path
import logging

logger = logging.getLogger(__name__)

STEP_PREFIX = "## STEP"
ITEM_PREFIX = "→"


def parse_process_steps(markdown: str) -> List[Dict[str, Union[str, List[str]]]]:
    """Split the process overview into steps.

    A line starting with ``## STEP`` opens a step titled by the rest of the
    heading; lines starting with an arrow add items to the open step. Other
    lines are ignored.
    """
    steps: List[Dict[str, Union[str, List[str]]]] = []
    current: Optional[Dict[str, Union[str, List[str]]]] = None
    for line in markdown.split("\n"):
        if line.startswith(STEP_PREFIX):
            if current:
                steps.append(current)
            current = {"title": line.replace("## ", "", 1).strip(), "items": []}
        elif line.startswith(ITEM_PREFIX) and current is not None:
            current["items"].append(line.replace(ITEM_PREFIX, "", 1).strip())
    if current:
        steps.append(current)
    return steps


class ContentService:
    def __init__(self, content_dir: Optional[str] = None):
        self.content_dir = Path(content_dir or settings.content_dir)

    def _read(self, filename: str, label: str) -> str:
        try:
            return (self.content_dir / filename).read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Error loading {label}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to load {label}")

    def get_welcome_text(self) -> str:
        return self._read("welcome.md", "welcome text").strip()

    def get_process_steps(self) -> List[Dict[str, Union[str, List[str]]]]:
        return parse_process_steps(self._read("process-overview.md", "process overview"))


def get_content_service() -> ContentService:
    return ContentService()
