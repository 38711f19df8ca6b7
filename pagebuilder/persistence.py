"""
pagebuilder/persistence.py - Page persistence collaborators

The editing core never reads or writes storage. PageBuilder talks to a
PageRepository to seed the store and to save or publish the committed list.
Repositories raise on failure; the caller classifies the exception.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
import copy
import json
import logging
import re

from pagebuilder.core.section import Section

logger = logging.getLogger("pagebuilder.persistence")


class PageRepository(ABC):
    """Load and save the sections of a page."""

    @abstractmethod
    def load_page(self, page_id: str) -> List[Section]:
        """
        Load a page's sections.

        Returns:
            Sections in stored order; empty for a page never saved
        """

    @abstractmethod
    def save_page(self, page_id: str, sections: List[Section], publish: bool = False) -> None:
        """
        Persist a page's sections.

        Args:
            page_id: Page to write
            sections: Full committed list
            publish: Also mark the page as published
        """


class InMemoryPageRepository(PageRepository):
    """Dict-backed repository for tests and local tooling."""

    def __init__(self, pages: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self._pages: Dict[str, List[Dict[str, Any]]] = copy.deepcopy(pages or {})
        self._published: Dict[str, List[Dict[str, Any]]] = {}

    def load_page(self, page_id: str) -> List[Section]:
        return [Section.from_dict(item) for item in self._pages.get(page_id, [])]

    def save_page(self, page_id: str, sections: List[Section], publish: bool = False) -> None:
        data = [s.to_dict() for s in sections]
        self._pages[page_id] = data
        if publish:
            self._published[page_id] = copy.deepcopy(data)

    def stored(self, page_id: str) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._pages.get(page_id, []))

    def published(self, page_id: str) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._published.get(page_id, []))


_SAFE_PAGE_ID = re.compile(r"^[A-Za-z0-9_-]+$")


class JsonFilePageRepository(PageRepository):
    """
    One JSON document per page under a directory.

    Document shape:
        {"pageId": "home", "status": "draft", "updatedAt": "...", "sections": [...]}
    """

    def __init__(self, pages_dir: str):
        self._pages_dir = Path(pages_dir)

    def path_for(self, page_id: str) -> Path:
        if not _SAFE_PAGE_ID.match(page_id):
            raise ValueError(f"Invalid page id: {page_id!r}")
        return self._pages_dir / f"{page_id}.json"

    def load_page(self, page_id: str) -> List[Section]:
        path = self.path_for(page_id)
        if not path.exists():
            logger.info(f"No stored page '{page_id}', starting empty")
            return []
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return [Section.from_dict(item) for item in data.get("sections", [])]

    def save_page(self, page_id: str, sections: List[Section], publish: bool = False) -> None:
        path = self.path_for(page_id)
        path.parent.mkdir(parents=True, exist_ok=True)

        previous_status = "draft"
        if path.exists():
            with open(path, "r", encoding="utf-8") as f:
                previous_status = json.load(f).get("status", "draft")

        document = {
            "pageId": page_id,
            "status": "published" if publish else previous_status,
            "updatedAt": datetime.now(timezone.utc).isoformat(),
            "sections": [s.to_dict() for s in sections],
        }
        with open(path, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, default=str)
        logger.info(f"Saved page '{page_id}' ({len(sections)} sections) to {path}")


def load_page_file(filepath: str) -> List[Section]:
    """Read sections from a page document or a bare JSON list of sections."""
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)
    items = data.get("sections", []) if isinstance(data, dict) else data
    return [Section.from_dict(item) for item in items]
