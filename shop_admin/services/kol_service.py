# shop_admin/services/kol_service.py
from typing import Dict, Optional, Any, Union
from ..models.customer import AccountStatus
from ..models.kol import KOL, KOLApplication
from ..config import Config
from ..utils.validators import validate_status_reason, validate_rejection_reason
from .api_client import ApiClient

class KOLService:
    """KOL accounts and programme applications"""

    def __init__(self, api: ApiClient):
        self.api = api

    async def get_kols(self, token: str, page: int = 1, limit: Optional[int] = None,
                       **filters) -> Dict[str, Any]:
        params = {'page': page, 'limit': limit or Config.PAGE_SIZE, **filters}
        response = await self.api.get('/api/kols/list', token, params=params)
        pagination = response.get('pagination') or {}
        kols = [KOL.model_validate(k) for k in response.get('kols') or []]
        return {
            'kols': kols,
            'page': pagination.get('page', page),
            'total': pagination.get('total', len(kols)),
            'pages': pagination.get('pages', 1)
        }

    async def get_kol(self, token: str, kol_id: Union[int, str]) -> KOL:
        response = await self.api.get(f'/api/kols/{kol_id}', token)
        return KOL.model_validate(response['kol'])

    async def update_kol_status(self, token: str, kol_id: Union[int, str],
                                status: AccountStatus, reason: Optional[str] = None) -> Dict[str, Any]:
        """Activate, suspend or ban a KOL"""
        status = AccountStatus(status)
        validate_status_reason(status.value, reason)
        return await self.api.put(
            f'/api/kols/{kol_id}/status',
            token,
            json={'status': status.value, 'reason': reason or ''}
        )

    async def get_applications(self, token: str, page: int = 1, limit: Optional[int] = None,
                               **filters) -> Dict[str, Any]:
        params = {'page': page, 'limit': limit or Config.PAGE_SIZE, **filters}
        response = await self.api.get('/api/kols/list/applications', token, params=params)
        pagination = response.get('pagination') or {}
        applications = [
            KOLApplication.model_validate(a) for a in response.get('applications') or []
        ]
        return {
            'applications': applications,
            'page': pagination.get('page', page),
            'total': pagination.get('total', len(applications)),
            'pages': pagination.get('pages', 1)
        }

    async def get_application(self, token: str, application_id: Union[int, str]) -> KOLApplication:
        response = await self.api.get(f'/api/kols/applications/{application_id}', token)
        return KOLApplication.model_validate(response['application'])

    async def approve_application(self, token: str, application_id: Union[int, str],
                                  tier_id: Optional[int] = None) -> Dict[str, Any]:
        """Accept an application, optionally placing the KOL in a tier"""
        data = {'tier_id': tier_id} if tier_id is not None else {}
        return await self.api.put(
            f'/api/kols/applications/{application_id}/approve', token, json=data
        )

    async def reject_application(self, token: str, application_id: Union[int, str],
                                 reason: str) -> Dict[str, Any]:
        validate_rejection_reason(reason)
        return await self.api.put(
            f'/api/kols/applications/{application_id}/reject',
            token,
            json={'reason': reason}
        )
