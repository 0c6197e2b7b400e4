# shop_admin/services/review_service.py
from typing import Dict, Optional, Any, Union
from ..models.review import Review, ReviewStatus
from ..config import Config
from ..utils.validators import validate_rejection_reason
from .api_client import ApiClient

class ReviewService:
    """Review moderation"""

    def __init__(self, api: ApiClient):
        self.api = api

    async def get_reviews(self, token: str, page: int = 1, limit: Optional[int] = None,
                          **filters) -> Dict[str, Any]:
        params = {'page': page, 'limit': limit or Config.PAGE_SIZE, **filters}
        response = await self.api.get('/api/reviews', token, params=params)
        pagination = response.get('pagination') or {}
        reviews = [Review.model_validate(r) for r in response.get('reviews') or []]
        return {
            'reviews': reviews,
            'page': pagination.get('page', page),
            'total': pagination.get('total', len(reviews)),
            'pages': pagination.get('pages', 1)
        }

    async def get_review(self, token: str, review_id: Union[int, str]) -> Review:
        response = await self.api.get(f'/api/reviews/{review_id}', token)
        return Review.model_validate(response['review'])

    async def update_review_status(self, token: str, review_id: Union[int, str],
                                   status: ReviewStatus,
                                   rejection_reason: Optional[str] = None) -> Dict[str, Any]:
        """Approve or reject a review; rejections need a reason"""
        status = ReviewStatus(status)
        if status == ReviewStatus.PENDING:
            raise ValueError("Reviews can only be approved or rejected")

        data = {'status': status.value}
        if status == ReviewStatus.REJECTED:
            validate_rejection_reason(rejection_reason)
            data['rejection_reason'] = rejection_reason
        return await self.api.put(f'/api/reviews/{review_id}/status', token, json=data)

    async def get_review_statistics(self, token: str) -> Dict[str, Any]:
        response = await self.api.get('/api/reviews/statistics', token)
        return response.get('statistics') or {}

    async def delete_review(self, token: str, review_id: Union[int, str]) -> Dict[str, Any]:
        return await self.api.delete(f'/api/reviews/{review_id}', token)
