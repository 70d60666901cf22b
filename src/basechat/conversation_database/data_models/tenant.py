"""
Tenant data model and storage interface.

A tenant is the organisation namespace for conversations, documents and
settings. Its slug appears in URLs and must be unique across tenants. The
optional prompt fields hold the admin's template overrides; 'None' or an empty
string means the built-in default is used.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel


class Tenant(BaseModel):
    id: str
    name: str
    slug: str
    grounding_prompt: str | None = None
    system_prompt: str | None = None


class TenantDatabase(ABC):
    """Abstract repository for 'Tenant' records."""

    @abstractmethod
    async def create_tenant(self, tenant: Tenant) -> Tenant:
        pass

    @abstractmethod
    async def get_tenant_by_id(self, tenant_id: str) -> Tenant | None:
        pass

    @abstractmethod
    async def get_tenant_by_slug(self, slug: str, exclude_tenant_id: str | None = None) -> Tenant | None:
        """Return a tenant with 'slug', ignoring the tenant whose id is 'exclude_tenant_id'."""
        pass
