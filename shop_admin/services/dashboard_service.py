# shop_admin/services/dashboard_service.py
import asyncio
from typing import Dict, Any, Tuple
from datetime import date, datetime, timedelta
import pytz
from ..config import Config
from .api_client import ApiClient

class DashboardService:
    """Dashboard figures for a date range"""
    
    def __init__(self, api: ApiClient):
        self.api = api
        self.tz = pytz.timezone(Config.TIMEZONE)

    def daily_range(self) -> Tuple[str, str]:
        """Today"""
        today = datetime.now(self.tz).date()
        return self._range(today, today)

    def weekly_range(self) -> Tuple[str, str]:
        """Last seven days"""
        today = datetime.now(self.tz).date()
        return self._range(today - timedelta(days=7), today)

    def monthly_range(self) -> Tuple[str, str]:
        """Month to date"""
        today = datetime.now(self.tz).date()
        return self._range(today.replace(day=1), today)

    @staticmethod
    def _range(start_date: date, end_date: date) -> Tuple[str, str]:
        return start_date.isoformat(), end_date.isoformat()

    async def _fetch(self, path: str, token: str, start_date: str, end_date: str,
                     **extra) -> Dict[str, Any]:
        return await self.api.get(
            f'/api/dashboard/{path}',
            token,
            params={'start_date': start_date, 'end_date': end_date, **extra}
        )

    async def get_dashboard_stats(self, token: str, start_date: str, end_date: str) -> Dict[str, Any]:
        return await self._fetch('stats', token, start_date, end_date)

    async def get_revenue_data(self, token: str, start_date: str, end_date: str) -> Dict[str, Any]:
        return await self._fetch('revenue', token, start_date, end_date)

    async def get_top_products(self, token: str, start_date: str, end_date: str) -> Dict[str, Any]:
        return await self._fetch('top-products', token, start_date, end_date)

    async def get_kol_performance(self, token: str, start_date: str, end_date: str,
                                  sort_by: str = 'commission') -> Dict[str, Any]:
        return await self._fetch('kol-performance', token, start_date, end_date, sort_by=sort_by)

    async def get_customer_stats(self, token: str, start_date: str, end_date: str) -> Dict[str, Any]:
        return await self._fetch('customer-stats', token, start_date, end_date)

    async def export_data(self, token: str, start_date: str, end_date: str,
                          format: str = 'csv') -> bytes:
        """Dashboard export file as raw bytes"""
        return await self.api.get(
            '/api/dashboard/export',
            token,
            params={'start_date': start_date, 'end_date': end_date, 'format': format},
            raw=True
        )

    async def refresh_dashboard(self, token: str, start_date: str, end_date: str) -> Dict[str, Any]:
        """Fetch every dashboard panel at once"""
        stats, revenue, top_products, kol_performance, customer_stats = await asyncio.gather(
            self.get_dashboard_stats(token, start_date, end_date),
            self.get_revenue_data(token, start_date, end_date),
            self.get_top_products(token, start_date, end_date),
            self.get_kol_performance(token, start_date, end_date),
            self.get_customer_stats(token, start_date, end_date)
        )
        return {
            'stats': stats,
            'revenue': revenue,
            'top_products': top_products,
            'kol_performance': kol_performance,
            'customer_stats': customer_stats
        }
