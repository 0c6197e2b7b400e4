# shop_admin/services/kol_tier_service.py
from typing import List, Dict, Any
from ..models.kol import KOLTier
from ..utils.validators import validate_tier
from .api_client import ApiClient

class KOLTierService:
    """Commission tier CRUD"""

    def __init__(self, api: ApiClient):
        self.api = api

    async def get_tiers(self, token: str) -> List[KOLTier]:
        response = await self.api.get('/api/kol-tiers/list', token)
        return [KOLTier.model_validate(t) for t in response.get('tiers') or []]

    async def get_tier(self, token: str, tier_id: int) -> KOLTier:
        response = await self.api.get(f'/api/kol-tiers/{tier_id}', token)
        return KOLTier.model_validate(response['tier'])

    async def create_tier(self, token: str, tier_data: Dict[str, Any]) -> Dict[str, Any]:
        validate_tier(tier_data)
        return await self.api.post('/api/kol-tiers/create', token, json=_payload(tier_data))

    async def update_tier(self, token: str, tier_id: int,
                          tier_data: Dict[str, Any]) -> Dict[str, Any]:
        validate_tier(tier_data)
        return await self.api.put(
            f'/api/kol-tiers/update/{tier_id}', token, json=_payload(tier_data)
        )

    async def delete_tier(self, token: str, tier_id: int) -> Dict[str, Any]:
        return await self.api.delete(f'/api/kol-tiers/delete/{tier_id}', token)

def _payload(tier_data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        'tier_name': tier_data['tier_name'].strip(),
        'commission_rate': float(tier_data['commission_rate']),
        'min_successful_purchases': int(tier_data['min_successful_purchases']),
        'description': tier_data.get('description') or ''
    }
