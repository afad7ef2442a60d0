"""
Company operations: companies, their settings and their email domains.

Every write invalidates the whole ("companies",) scope, list and details
alike, since user counts and domain lists appear in both.
"""

from typing import Any, Dict, Optional

from api.client import ApiClient
from api.models.common_schemas import MessageResponse, dump_input
from api.models.company_schemas import (
    AddDomainInput,
    CompaniesResponse,
    CompanyResponse,
    CreateCompanyInput,
    DomainResponse,
    UpdateCompanyInput,
)
from services.base_service import ResourceService
from services.query_cache import QueryCache, QueryState
from utils.url_builder import path_segment

COMPANIES_KEY = ("companies",)


class CompanyService(ResourceService):
    """
    Queries:
        companies(), company(company_id)

    Mutations (call ``.mutate(...)``):
        create_company(data), update_company(company_id, data),
        delete_company(company_id), add_domain(company_id, data),
        remove_domain(company_id, domain_id)
    """

    def __init__(self, api: ApiClient, cache: QueryCache):
        super().__init__(api, cache)
        invalidate_companies = lambda variables: [COMPANIES_KEY]

        self.create_company = self._mutation(self._create_company, invalidate_companies)
        self.update_company = self._mutation(self._update_company, invalidate_companies)
        self.delete_company = self._mutation(self._delete_company, invalidate_companies)
        self.add_domain = self._mutation(self._add_domain, invalidate_companies)
        self.remove_domain = self._mutation(self._remove_domain, invalidate_companies)

    # ============ QUERIES ============

    def companies(self) -> QueryState:
        return self._query(
            COMPANIES_KEY,
            lambda: self.api.get("/api/companies", schema=CompaniesResponse),
        )

    def company(self, company_id: Optional[str]) -> QueryState:
        """Company with its users. Inactive while company_id is None."""
        return self._query(
            COMPANIES_KEY + (company_id,),
            lambda: self.api.get(f"/api/companies/{path_segment(company_id)}", schema=CompanyResponse),
            enabled=bool(company_id),
        )

    # ============ MUTATIONS ============

    def _create_company(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dump_input(self._validated(CreateCompanyInput, data))
        return self.api.post("/api/companies", payload, schema=CompanyResponse)

    def _update_company(self, company_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dump_input(self._validated(UpdateCompanyInput, data))
        return self.api.put(f"/api/companies/{path_segment(company_id)}", payload, schema=CompanyResponse)

    def _delete_company(self, company_id: str) -> Dict[str, Any]:
        return self.api.delete(f"/api/companies/{path_segment(company_id)}", schema=MessageResponse)

    def _add_domain(self, company_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dump_input(self._validated(AddDomainInput, data))
        return self.api.post(
            f"/api/companies/{path_segment(company_id)}/domains", payload, schema=DomainResponse
        )

    def _remove_domain(self, company_id: str, domain_id: str) -> Dict[str, Any]:
        return self.api.delete(
            f"/api/companies/{path_segment(company_id)}/domains/{path_segment(domain_id)}",
            schema=MessageResponse,
        )
