"""Supabase repository for shopping list rows."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from nutrivalor.domain.shopping import ShoppingListEntry
from nutrivalor.services.shopping import ShoppingListRepository, entry_from_row


@dataclass
class SupabaseShoppingListRepository(ShoppingListRepository):
    """Supabase implementation for a user's shopping list."""

    client: Client

    def list_items(self, user_id: UUID) -> list[dict[str, object]]:
        """Return raw rows in creation order."""
        response = (
            self.client.table("shopping_list")
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at")
            .execute()
        )
        return list(response.data or [])

    def find_item(
        self, user_id: UUID, food_id: UUID, unit: str | None
    ) -> ShoppingListEntry | None:
        """Return the row holding a food in a unit, if present."""
        query = (
            self.client.table("shopping_list")
            .select("*")
            .eq("user_id", str(user_id))
            .eq("food_id", str(food_id))
        )
        if unit is not None:
            query = query.eq("unit", unit)
        response = query.limit(1).execute()
        if not response.data:
            return None
        return entry_from_row(response.data[0])

    def create_item(self, user_id: UUID, entry: ShoppingListEntry) -> ShoppingListEntry:
        """Insert a row and return it with its id."""
        payload = {"user_id": str(user_id), **entry.as_row()}
        payload.pop("id", None)
        response = self.client.table("shopping_list").insert(payload).execute()
        created = entry_from_row(response.data[0]) if response.data else None
        if created is None:
            raise RuntimeError("Failed to create shopping list item")
        return created

    def update_quantity(
        self, user_id: UUID, entry_id: UUID, quantity: int
    ) -> ShoppingListEntry | None:
        """Set a row's quantity."""
        response = (
            self.client.table("shopping_list")
            .update({"quantity": quantity})
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            return None
        return entry_from_row(response.data[0])

    def delete_item(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete a row."""
        self.client.table("shopping_list").delete().eq("id", str(entry_id)).eq(
            "user_id", str(user_id)
        ).execute()

    def clear(self, user_id: UUID) -> None:
        """Delete all rows for a user."""
        self.client.table("shopping_list").delete().eq(
            "user_id", str(user_id)
        ).execute()
