from __future__ import annotations

from typing import Optional

import httpx

from config import get_settings
from errors import NotFoundError
from models import CategoryColor
from periods import DMY
from schemas import CategoryOut, DateRangeOut, DaysPageOut, ExpenseOut

OWNER_HEADER = "X-Owner-Token"


class LedgerClient:
    """Async client for the ledger HTTP API.

    ``fetch_year_range`` has the signature ``WindowCache`` expects from its
    fetcher, so a client instance can back one or more caches directly.
    """

    def __init__(
        self,
        owner_token: str,
        *,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url or get_settings().api_url,
            headers={OWNER_HEADER: owner_token},
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "LedgerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        resp = await self._http.request(method, url, **kwargs)
        if resp.status_code == 404:
            raise NotFoundError(resp.json().get("detail", "Not found"))
        resp.raise_for_status()
        return resp

    async def fetch_year_range(self, from_year: int, to_year: int) -> DateRangeOut:
        resp = await self._request(
            "POST",
            "/api/expenses/range",
            json={"from_year": from_year, "to_year": to_year},
        )
        return DateRangeOut.model_validate(resp.json())

    async def days_page(
        self, page: int = 0, page_size: Optional[int] = None
    ) -> DaysPageOut:
        params: dict[str, int] = {"page": page}
        if page_size is not None:
            params["page_size"] = page_size
        resp = await self._request("GET", "/api/days", params=params)
        return DaysPageOut.model_validate(resp.json())

    async def create_expense(
        self,
        amount: str,
        date: DMY,
        *,
        category_id: Optional[str] = None,
        category_name: Optional[str] = None,
        category_color: CategoryColor = CategoryColor.pink,
    ) -> ExpenseOut:
        payload: dict[str, object] = {
            "amount": amount,
            "date": {"year": date.year, "month_idx": date.month_idx, "day": date.day},
            "category_color": category_color.value,
        }
        if category_id is not None:
            payload["category_id"] = category_id
        if category_name is not None:
            payload["category_name"] = category_name
        resp = await self._request("POST", "/api/expenses", json=payload)
        return ExpenseOut.model_validate(resp.json())

    async def delete_expense(self, expense_id: str) -> ExpenseOut:
        resp = await self._request("DELETE", f"/api/expenses/{expense_id}")
        return ExpenseOut.model_validate(resp.json())

    async def list_categories(self) -> list[CategoryOut]:
        resp = await self._request("GET", "/api/categories")
        return [CategoryOut.model_validate(item) for item in resp.json()]

    async def create_category(
        self, name: str, color: CategoryColor = CategoryColor.pink
    ) -> CategoryOut:
        resp = await self._request(
            "POST", "/api/categories", json={"name": name, "color": color.value}
        )
        return CategoryOut.model_validate(resp.json())

    async def update_category(
        self, category_id: str, name: str, color: CategoryColor
    ) -> CategoryOut:
        resp = await self._request(
            "POST",
            f"/api/categories/{category_id}",
            json={"name": name, "color": color.value},
        )
        return CategoryOut.model_validate(resp.json())

    async def delete_category(self, category_id: str) -> CategoryOut:
        resp = await self._request("DELETE", f"/api/categories/{category_id}")
        return CategoryOut.model_validate(resp.json())
