from fastapi import APIRouter, Depends
from onboarding.database.supabase_client import get_supabase, get_service_supabase
from onboarding.modules.store.schemas import (
    ProductCreate, ProductUpdate, ProductResponse, TransactionResponse, RedemptionResponse
)
from onboarding.modules.store.service import StoreService
from onboarding.core.dependencies import get_current_profile, require_owner
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/store", tags=["store"])


def get_store_service(
    supabase: Client = Depends(get_supabase),
    service_supabase: Client = Depends(get_service_supabase)
) -> StoreService:
    return StoreService(supabase, service_supabase)


@router.get("/products", response_model=List[ProductResponse])
async def list_products(
    profile: Dict = Depends(get_current_profile),
    service: StoreService = Depends(get_store_service)
):
    """Active catalogue, cheapest first"""
    return service.list_active_products()


@router.get("/products/all", response_model=List[ProductResponse])
async def list_all_products(
    owner: Dict = Depends(require_owner),
    service: StoreService = Depends(get_store_service)
):
    return service.list_all_products()


@router.post("/products", response_model=ProductResponse, status_code=201)
async def create_product(
    data: ProductCreate,
    owner: Dict = Depends(require_owner),
    service: StoreService = Depends(get_store_service)
):
    return service.create_product(data)


@router.patch("/products/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    updates: ProductUpdate,
    owner: Dict = Depends(require_owner),
    service: StoreService = Depends(get_store_service)
):
    return service.update_product(product_id, updates)


@router.delete("/products/{product_id}", status_code=204)
async def delete_product(
    product_id: str,
    owner: Dict = Depends(require_owner),
    service: StoreService = Depends(get_store_service)
):
    service.delete_product(product_id)
    return None


@router.post("/products/{product_id}/redeem", response_model=RedemptionResponse, status_code=201)
async def redeem_product(
    product_id: str,
    profile: Dict = Depends(get_current_profile),
    service: StoreService = Depends(get_store_service)
):
    """Spend store points on a product"""
    return service.redeem(profile, product_id)


@router.get("/transactions/me", response_model=List[TransactionResponse])
async def list_my_transactions(
    profile: Dict = Depends(get_current_profile),
    service: StoreService = Depends(get_store_service)
):
    return service.list_user_transactions(profile["id"])


@router.get("/transactions", response_model=List[TransactionResponse])
async def list_all_transactions(
    owner: Dict = Depends(require_owner),
    service: StoreService = Depends(get_store_service)
):
    return service.list_all_transactions()


@router.delete("/transactions/{transaction_id}", status_code=204)
async def delete_transaction(
    transaction_id: str,
    owner: Dict = Depends(require_owner),
    service: StoreService = Depends(get_store_service)
):
    service.delete_transaction(transaction_id)
    return None
