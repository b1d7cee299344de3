"""
Profile storage for birth data.
Supabase persists profiles with upsert + read-back verification; an in-memory
store is used when no credentials are configured.
"""
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from supabase import Client, create_client

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")

PROFILE_FIELDS = (
    "profile_id",
    "gender",
    "birth_year",
    "birth_month",
    "birth_day",
    "birth_hour",
    "city",
    "is_lunar",
    "session_data",
)


def _row_to_profile(row: Dict[str, Any]) -> Dict[str, Any]:
    profile = {key: row.get(key) for key in PROFILE_FIELDS}
    profile["is_lunar"] = bool(row.get("is_lunar"))
    return profile


class ProfileRepository:
    """save / load / delete / list over profile dicts keyed by profile_id."""

    def save(self, profile: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def load(self, profile_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def delete(self, profile_id: str) -> bool:
        raise NotImplementedError

    def list(self) -> List[Dict[str, Any]]:
        raise NotImplementedError


class InMemoryProfileRepository(ProfileRepository):

    def __init__(self):
        self._rows: Dict[str, Dict[str, Any]] = {}

    def save(self, profile: Dict[str, Any]) -> bool:
        row = dict(profile)
        row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        self._rows[row["profile_id"]] = row
        return True

    def load(self, profile_id: str) -> Optional[Dict[str, Any]]:
        row = self._rows.get(profile_id)
        return _row_to_profile(row) if row else None

    def delete(self, profile_id: str) -> bool:
        return self._rows.pop(profile_id, None) is not None

    def list(self) -> List[Dict[str, Any]]:
        rows = sorted(self._rows.values(), key=lambda r: r["created_at"], reverse=True)
        return [_row_to_profile(row) for row in rows]


class SupabaseProfileRepository(ProfileRepository):
    """Table `profiles` in Supabase."""

    table_name = "profiles"

    def __init__(self, client: Client):
        self.client = client

    def _table(self):
        return self.client.table(self.table_name)

    def save(self, profile: Dict[str, Any]) -> bool:
        """
        Upsert with strict verification:
        1. Upsert data.
        2. Empty response data means RLS blocked the write.
        3. Immediate read-back to confirm persistence.
        """
        data = {key: profile.get(key) for key in PROFILE_FIELDS if key != "session_data"}
        data["is_lunar"] = 1 if profile.get("is_lunar") else 0
        data["created_at"] = datetime.now(timezone.utc).isoformat()
        if profile.get("session_data") is not None:
            data["session_data"] = profile["session_data"]

        try:
            response = self._table().upsert(data).execute()
            if not response.data:
                raise RuntimeError("写入被拒绝 (RLS Policy Violation): 未返回数据")

            verification = self._table().select("*").eq("profile_id", profile["profile_id"]).execute()
            if not verification.data:
                raise RuntimeError("写入验证失败: 数据未持久化")
            return True
        except Exception as e:
            print(f"ERROR: saving profile {profile.get('profile_id')}: {e}")
            return False

    def load(self, profile_id: str) -> Optional[Dict[str, Any]]:
        try:
            response = self._table().select("*").eq("profile_id", profile_id).execute()
        except Exception as e:
            print(f"ERROR: fetching profile {profile_id}: {e}")
            return None
        if response.data:
            return _row_to_profile(response.data[0])
        return None

    def delete(self, profile_id: str) -> bool:
        try:
            response = self._table().delete().eq("profile_id", profile_id).execute()
        except Exception as e:
            print(f"ERROR: deleting profile {profile_id}: {e}")
            return False
        # delete returns the removed rows when authorized
        return len(response.data) > 0

    def list(self) -> List[Dict[str, Any]]:
        try:
            response = self._table().select("*").order("created_at", desc=True).execute()
        except Exception as e:
            print(f"ERROR: listing profiles: {e}")
            return []
        return [_row_to_profile(row) for row in response.data]


def get_supabase_client() -> Optional[Client]:
    url = os.environ.get("SUPABASE_URL")
    key = (
        os.environ.get("SUPABASE_KEY")
        or os.environ.get("SUPABASE_SERVICE_ROLE_KEY")
        or os.environ.get("SUPABASE_ANON_KEY")
    )
    if not url or not key:
        print("WARNING: Supabase credentials not found, profiles are kept in memory.")
        return None

    try:
        return create_client(url, key)
    except Exception as e:
        print(f"ERROR: Failed to initialize Supabase client: {e}")
        return None


_repository: Optional[ProfileRepository] = None


def get_profile_repository() -> ProfileRepository:
    """Singleton repository: Supabase when configured, otherwise in memory."""
    global _repository
    if _repository is None:
        client = get_supabase_client()
        _repository = SupabaseProfileRepository(client) if client else InMemoryProfileRepository()
    return _repository
