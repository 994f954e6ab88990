from supabase import Client
from onboarding.modules.store.schemas import (
    ProductCreate, ProductUpdate, ProductResponse, TransactionResponse, RedemptionResponse
)
from onboarding.core.clock import utc_now_iso
from onboarding.core.errors import raise_db_error
from postgrest.exceptions import APIError
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def format_point_display(points: int) -> str:
    return f"{points} POINTS"


def can_redeem(points: int, cost: int, quantity: int, is_active: bool = True) -> bool:
    """Whether the REDEEM action is enabled for this balance and product"""
    return is_active and quantity > 0 and points >= cost


def _first(data: Any) -> Optional[Dict[str, Any]]:
    if isinstance(data, list):
        return data[0] if data else None
    return data or None


def _product(row: Dict[str, Any]) -> ProductResponse:
    return ProductResponse(**row, point_display=format_point_display(row.get("point_cost") or 0))


class StoreService:
    """Catalogue reads go through the caller's client; balance and stock writes
    go through the service-role client."""

    def __init__(self, supabase: Client, service_supabase: Optional[Client] = None):
        self.supabase = supabase
        self.service_supabase = service_supabase or supabase

    # Products

    def list_active_products(self) -> List[ProductResponse]:
        try:
            result = self.supabase.table("store_products")\
                .select("*")\
                .eq("is_active", True)\
                .order("point_cost")\
                .execute()
            return [_product(p) for p in result.data or []]
        except Exception as e:
            raise_db_error(e, "Failed to fetch products")

    def list_all_products(self) -> List[ProductResponse]:
        try:
            result = self.supabase.table("store_products")\
                .select("*")\
                .order("created_at", desc=True)\
                .execute()
            return [_product(p) for p in result.data or []]
        except Exception as e:
            raise_db_error(e, "Failed to fetch products")

    def _get_product(self, product_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("store_products")\
                .select("*")\
                .eq("id", product_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise_db_error(e, "Failed to fetch product")
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Product not found")
        return result.data

    def create_product(self, data: ProductCreate) -> ProductResponse:
        try:
            result = self.supabase.table("store_products").insert({
                "name": data.name,
                "description": data.description or None,
                "image_url": data.image_url or None,
                "product_code": data.product_code,
                "point_cost": data.point_cost,
                "quantity": data.quantity,
                "is_active": data.is_active,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create product")
            return _product(result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to create product")

    def update_product(self, product_id: str, updates: ProductUpdate) -> ProductResponse:
        update_data = updates.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")
        update_data["updated_at"] = utc_now_iso()
        try:
            result = self.supabase.table("store_products")\
                .update(update_data)\
                .eq("id", product_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Product not found")
            return _product(result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to update product")

    def delete_product(self, product_id: str) -> None:
        try:
            result = self.supabase.table("store_products")\
                .delete()\
                .eq("id", product_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Product not found")
        except Exception as e:
            raise_db_error(e, "Failed to delete product")

    # Redemption

    def redeem(self, profile: Dict[str, Any], product_id: str) -> RedemptionResponse:
        """Spend points on one unit of a product.

        The balance check, both decrements and the transaction row happen in
        the purchase_store_product database function, so concurrent
        redemptions cannot spend the same points twice. The checks here only
        give early, specific errors.
        """
        if not profile.get("is_store_user"):
            raise HTTPException(status_code=403, detail="Store access is not enabled for this account")

        product = self._get_product(product_id)
        points = profile.get("store_points") or 0
        cost = product.get("point_cost") or 0
        if not product.get("is_active"):
            raise HTTPException(status_code=400, detail="Product is not available")
        if (product.get("quantity") or 0) <= 0:
            raise HTTPException(status_code=400, detail="Product is out of stock")
        if not can_redeem(points, cost, product.get("quantity") or 0, bool(product.get("is_active"))):
            raise HTTPException(status_code=400, detail="Insufficient points")

        try:
            result = self.service_supabase.rpc("purchase_store_product", {
                "p_product_id": product_id,
                "p_user_id": profile["id"],
            }).execute()
        except APIError as e:
            # Raised when the balance or stock changed since the checks above
            logger.warning(f"Purchase of {product_id} by {profile['id']} rejected: {e.message}")
            raise HTTPException(status_code=400, detail=e.message or "Purchase failed")
        except Exception as e:
            raise_db_error(e, "Purchase failed")

        purchase = _first(result.data)
        if not purchase:
            raise HTTPException(status_code=500, detail="Purchase failed: No data returned")
        logger.info(f"User {profile['id']} redeemed {product['product_code']} for {cost} points")
        return RedemptionResponse(**purchase)

    # Transactions

    def list_user_transactions(self, user_id: str) -> List[TransactionResponse]:
        try:
            result = self.supabase.table("store_transactions")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .execute()
            return [TransactionResponse(**t) for t in result.data or []]
        except Exception as e:
            raise_db_error(e, "Failed to fetch transactions")

    def list_all_transactions(self) -> List[TransactionResponse]:
        try:
            result = self.supabase.table("store_transactions")\
                .select("*")\
                .order("created_at", desc=True)\
                .execute()
            return [TransactionResponse(**t) for t in result.data or []]
        except Exception as e:
            raise_db_error(e, "Failed to fetch transactions")

    def delete_transaction(self, transaction_id: str) -> None:
        try:
            result = self.service_supabase.table("store_transactions")\
                .delete()\
                .eq("id", transaction_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Transaction not found")
        except Exception as e:
            raise_db_error(e, "Failed to delete transaction")
