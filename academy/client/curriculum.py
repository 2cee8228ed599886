# academy/client/curriculum.py
from typing import Any, Dict, List, Optional

from academy.client.api import AcademyClient
from academy.services.curriculum import partition_curriculum


class CurriculumViewer:
    """Fetches class materials and groups them by type for display."""

    def __init__(self, client: AcademyClient):
        self.client = client

    def load(self, class_id, child_id: Optional[int] = None, public_only: bool = False) -> Dict[str, List[Any]]:
        params = {"childId": child_id} if child_id is not None else None
        data = self.client.get(f"/api/classes/{class_id}/curriculum", params=params,
                               fallback="Failed to load curriculum") or {}
        return partition_curriculum(data.get("items") or [], public_only=public_only)

    def load_public(self, class_id) -> Dict[str, List[Any]]:
        return self.client.get(f"/api/classes/{class_id}/curriculum/public", fallback="Failed to load curriculum")
