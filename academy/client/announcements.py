from typing import Any, Dict, List, Optional

from academy.client.api import AcademyClient


class AnnouncementViewer:
    """Newest-first class announcements for enrolled users, instructors and staff."""

    def __init__(self, client: AcademyClient):
        self.client = client

    def load(self, class_id, child_id: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {"childId": child_id} if child_id is not None else None
        data = self.client.get(f"/api/classes/{class_id}/announcements", params=params,
                               fallback="Failed to fetch announcements") or {}
        return list(data.get("announcements") or [])

    def post(self, class_id, title: str, content: str) -> Dict[str, Any]:
        return self.client.post(f"/api/classes/{class_id}/announcements", {"title": title, "content": content},
                                fallback="Failed to create announcement")
