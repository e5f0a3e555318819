"""Unit tests for the tenancy lifespan hook and settings."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from tessera.domain.tenancy.infrastructure.tenant_repository import TenantRepository
from tessera.domain.tenancy.lifespan import tenancy_lifespan
from tessera.domain.tenancy.settings import TenancySettings, get_tenancy_settings


class TestTenancySettings:
    @pytest.mark.unit
    def test_table_name_required(self) -> None:
        with patch.dict("os.environ", {}, clear=True), pytest.raises(ValidationError):
            TenancySettings()  # type: ignore[call-arg]

    @pytest.mark.unit
    def test_defaults(self) -> None:
        with patch.dict("os.environ", {"TENANT_DETAILS_TABLE_NAME": "tenants"}, clear=True):
            settings = TenancySettings()  # type: ignore[call-arg]
        assert settings.table_name == "tenants"
        assert settings.config_index_name == "tenantConfigIndex"
        assert settings.name_column == "tenantName"
        assert settings.config_column == "tenantConfig"


@pytest.mark.unit
@pytest.mark.asyncio(loop_scope="function")
async def test_lifespan_builds_repository(tenant_table: Any) -> None:
    app = MagicMock()
    app.state = MagicMock(spec=[])
    app.state.aws = MagicMock()
    app.state.aws.table.return_value = tenant_table

    get_tenancy_settings.cache_clear()
    with patch.dict("os.environ", {"TENANT_DETAILS_TABLE_NAME": "tenant-details"}):
        async with tenancy_lifespan(app):
            assert isinstance(app.state.tenant_repository, TenantRepository)
            app.state.aws.table.assert_called_once_with("tenant-details")
            app.state.health_checks["tenant_details_table"]()
    get_tenancy_settings.cache_clear()
