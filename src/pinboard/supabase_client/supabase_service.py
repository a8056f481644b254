import os
from typing import Optional, List, Dict, Any
from dotenv import load_dotenv
from supabase import create_client, Client

from ..interests import clamp_interests
from ..models import Pin

# Load environment variables
load_dotenv()

# PostgREST caps a single response at 1000 rows by default.
PAGE_SIZE = 1000


class SupabaseService:
    """Supabase-backed store for pins and user interest mappings"""

    def __init__(self):
        url = os.getenv("SUPABASE_URL")
        # Use service role key for full access
        key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

        if not url or not key:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set in environment")

        self.client: Client = create_client(url, key)

    # ==================== PINS ====================

    def get_pins(self, page_size: int = PAGE_SIZE) -> List[Dict[str, Any]]:
        """Get every pin, newest first, one page at a time"""
        rows: List[Dict[str, Any]] = []
        start = 0
        while True:
            response = (self.client.table("pins")
                       .select("*")
                       .order("created_at", desc=True)
                       .order("pin_id")
                       .range(start, start + page_size - 1)
                       .execute())
            page = response.data or []
            rows.extend(page)
            if len(page) < page_size:
                return rows
            start += page_size

    def get_pin(self, pin_id: str) -> Optional[Dict[str, Any]]:
        """Get a pin by ID"""
        response = self.client.table("pins").select("*").eq("pin_id", pin_id).execute()
        return response.data[0] if response.data else None

    def get_pin_models(self) -> List[Pin]:
        return [Pin.from_record(row) for row in self.get_pins()]

    def get_pin_model(self, pin_id: str) -> Optional[Pin]:
        row = self.get_pin(pin_id)
        return Pin.from_record(row) if row else None

    # ==================== USERS ====================

    def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get a user by ID"""
        response = self.client.table("users").select("*").eq("user_id", user_id).execute()
        return response.data[0] if response.data else None

    def get_user_interests(self, user_id: str) -> Dict[str, int]:
        """Get a user's category interest mapping (empty for unknown users)"""
        user = self.get_user(user_id)
        if not user:
            return {}
        return clamp_interests(user.get("interests"))

    def update_user_interests(self, user_id: str, interests: Dict[str, int]) -> Dict[str, int]:
        """Persist a user's category interest mapping"""
        cleaned = clamp_interests(interests)
        response = (self.client.table("users")
                   .update({"interests": cleaned})
                   .eq("user_id", user_id)
                   .execute())
        if not response.data:
            return cleaned
        return clamp_interests(response.data[0].get("interests"))


# Singleton instance
_supabase_service = None


def get_supabase_service() -> SupabaseService:
    """Get or create the singleton SupabaseService instance"""
    global _supabase_service
    if _supabase_service is None:
        _supabase_service = SupabaseService()
    return _supabase_service
