"""
API Services Layer.

Database operations behind the API endpoints. Every function takes the
request's ``AsyncSession`` as its first argument.
"""

from api.services.permissions import (
    reseed_defaults,
    grants_for,
    list_role_permissions,
    assign,
    deactivate,
    list_active,
    get_assignment,
    update_role,
)

from api.services.jobs import (
    create_job,
    get_job,
    list_jobs,
    update_job,
    update_job_status,
    delete_job,
)

from api.services.companies import (
    list_companies,
    get_company,
    create_company,
    update_company,
    delete_company,
    list_cost_centers,
    create_cost_center,
    update_cost_center,
    delete_cost_center,
    list_clients,
    create_client,
    update_client,
    delete_client,
    list_professions,
)

__all__ = [
    # Permissions
    "reseed_defaults",
    "grants_for",
    "list_role_permissions",
    "assign",
    "deactivate",
    "list_active",
    "get_assignment",
    "update_role",
    # Jobs
    "create_job",
    "get_job",
    "list_jobs",
    "update_job",
    "update_job_status",
    "delete_job",
    # Companies
    "list_companies",
    "get_company",
    "create_company",
    "update_company",
    "delete_company",
    "list_cost_centers",
    "create_cost_center",
    "update_cost_center",
    "delete_cost_center",
    "list_clients",
    "create_client",
    "update_client",
    "delete_client",
    "list_professions",
]
