# shop_admin/services/payout_service.py
import logging
from typing import List, Dict, Optional, Any, Union
from ..models.kol import Payout, PayoutStatus
from .api_client import ApiClient

class PayoutService:
    """KOL commission payouts"""

    def __init__(self, api: ApiClient):
        self.api = api
        self.logger = logging.getLogger(__name__)

    async def get_payouts(self, token: str, **params) -> Dict[str, Any]:
        """Payout list filtered by ``status``, ``kol_id``, dates, page"""
        response = await self.api.get('/api/kol-payouts/', token, params=params)
        payouts = [Payout.model_validate(p) for p in response.get('payouts') or []]
        pagination = response.get('pagination') or {}
        return {
            'payouts': payouts,
            'total': pagination.get('total', len(payouts)),
            'pages': pagination.get('pages', 1)
        }

    async def get_payout(self, token: str, payout_id: Union[int, str]) -> Payout:
        response = await self.api.get(f'/api/kol-payouts/{payout_id}', token)
        return Payout.model_validate(response['payout'])

    async def get_eligible_payouts(self, token: str, **params) -> List[Dict[str, Any]]:
        """KOLs with unpaid commission above the payout threshold"""
        response = await self.api.get('/api/kol-payouts/eligible', token, params=params)
        return response.get('eligible') or response.get('data') or []

    async def generate_payouts(self, token: str,
                               payout_data: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Create payout records for the selected KOLs"""
        response = await self.api.post(
            '/api/kol-payouts/generate',
            token,
            json={'payout_data': payout_data}
        )
        self.logger.info(f"Generated {len(payout_data)} payouts")
        return response

    async def update_payout_status(self, token: str, payout_id: Union[int, str],
                                   status: PayoutStatus,
                                   notes: Optional[str] = None) -> Dict[str, Any]:
        status = PayoutStatus(status)
        return await self.api.put(
            f'/api/kol-payouts/{payout_id}/status',
            token,
            json={'payment_status': status.value, 'notes': notes or ''}
        )

    async def export_payout_report(self, token: str, **params) -> bytes:
        """Report file (CSV by default) as raw bytes"""
        params.setdefault('format', 'csv')
        return await self.api.get('/api/kol-payouts/export', token, params=params, raw=True)
