"""Tests for the MCP server module."""

import os
import sys
import json
import pytest
from unittest.mock import patch

# Add src and mcp-server to path for imports BEFORE importing mcp modules
MCP_SERVER_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), '../../mcp-server'))
SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src'))

if MCP_SERVER_PATH not in sys.path:
    sys.path.insert(0, MCP_SERVER_PATH)
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from mcp.types import Tool, TextContent

# Import server module - need to import from the mcp-server directory
import importlib.util
server_spec = importlib.util.spec_from_file_location("mcp_server", os.path.join(MCP_SERVER_PATH, "server.py"))
mcp_server = importlib.util.module_from_spec(server_spec)
server_spec.loader.exec_module(mcp_server)


EXPECTED_TOOLS = {
    'get_allocation_state',
    'set_gross_salary',
    'set_tax_rate',
    'set_health_insurance_premium',
    'set_hsa_coverage_type',
    'set_allocation',
    'get_breakdown',
    'get_limits',
    'reset_allocations',
}


@pytest.fixture
def data_dir(tmp_path):
    """Point the server at a temporary data directory."""
    mcp_server.tools = None
    with patch.dict(os.environ, {'SAVINGS_ALLOCATOR_DATA_DIR': str(tmp_path)}):
        os.environ.pop('SAVINGS_ALLOCATOR_TAX_YEAR', None)
        yield str(tmp_path)
    mcp_server.tools = None


async def call(name, arguments=None):
    result = await mcp_server.call_tool(name, arguments or {})
    assert len(result) == 1
    assert isinstance(result[0], TextContent)
    return json.loads(result[0].text)


class TestServerConfiguration:
    """Tests for server configuration and setup."""

    def test_server_name(self):
        assert mcp_server.server.name == "savings-allocator"

    def test_allocation_param_schema(self):
        assert mcp_server.ALLOCATION_PARAM['type'] == 'string'
        assert 'hsa' in mcp_server.ALLOCATION_PARAM['enum']
        assert len(mcp_server.ALLOCATION_PARAM['enum']) == 6


class TestGetTools:
    """Tests for get_tools function."""

    def test_get_tools_uses_environment(self, data_dir):
        with patch.dict(os.environ, {'SAVINGS_ALLOCATOR_TAX_YEAR': '2025'}):
            sa_tools = mcp_server.get_tools()
        assert sa_tools.data_dir == data_dir
        assert sa_tools.limits.tax_year == 2025

    def test_get_tools_is_cached(self, data_dir):
        assert mcp_server.get_tools() is mcp_server.get_tools()


class TestListTools:
    """Tests for list_tools handler."""

    @pytest.mark.asyncio
    async def test_list_tools_contains_expected_tools(self):
        tools = await mcp_server.list_tools()
        assert all(isinstance(t, Tool) for t in tools)
        assert {t.name for t in tools} == EXPECTED_TOOLS

    @pytest.mark.asyncio
    async def test_tools_have_descriptions_and_schemas(self):
        for tool in await mcp_server.list_tools():
            assert tool.description
            assert tool.inputSchema['type'] == 'object'

    @pytest.mark.asyncio
    async def test_set_allocation_requires_allocation_and_percent(self):
        tools = {t.name: t for t in await mcp_server.list_tools()}
        assert tools['set_allocation'].inputSchema['required'] == ['allocation', 'percent']
        assert tools['set_hsa_coverage_type'].inputSchema['required'] == ['coverage_type']


class TestCallTool:
    """Tests for call_tool handler."""

    @pytest.mark.asyncio
    async def test_call_get_allocation_state(self, data_dir):
        result = await call('get_allocation_state')
        assert result['grossAnnualSalary'] == 0
        assert result['irs_tax_year'] == 2024

    @pytest.mark.asyncio
    async def test_call_set_allocation_and_breakdown(self, data_dir):
        await call('set_gross_salary', {'dollars': 100000})
        result = await call('set_allocation', {'allocation': 'traditional401k', 'percent': 25})
        assert result['applied_percent'] == pytest.approx(23)

        breakdown = await call('get_breakdown')
        assert breakdown['taxable_income'] == 77000
        assert breakdown['take_home']['annual'] == pytest.approx(60060)

    @pytest.mark.asyncio
    async def test_call_set_tax_rate_and_premium(self, data_dir):
        assert (await call('set_tax_rate', {'percent': 30}))['effective_tax_rate'] == 30
        result = await call('set_health_insurance_premium', {'dollars': 200})
        assert result['health_insurance_premium_monthly'] == 200

    @pytest.mark.asyncio
    async def test_call_set_hsa_coverage_type(self, data_dir):
        result = await call('set_hsa_coverage_type', {'coverage_type': 'family'})
        assert result['hsa_limit'] == 8300

    @pytest.mark.asyncio
    async def test_call_get_limits(self, data_dir):
        result = await call('get_limits')
        assert result['combined_401k']['remaining'] == 23000

    @pytest.mark.asyncio
    async def test_call_reset_allocations(self, data_dir):
        await call('set_gross_salary', {'dollars': 100000})
        result = await call('reset_allocations')
        assert result['state']['grossAnnualSalary'] == 0

    @pytest.mark.asyncio
    async def test_unknown_tool(self, data_dir):
        result = await call('does_not_exist')
        assert result == {"error": "Unknown tool: does_not_exist"}

    @pytest.mark.asyncio
    async def test_invalid_argument_returns_error(self, data_dir):
        result = await call('set_allocation', {'allocation': 'pension', 'percent': 5})
        assert "Unknown allocation" in result['error']

    @pytest.mark.asyncio
    async def test_missing_argument_returns_error(self, data_dir):
        result = await call('set_gross_salary', {})
        assert 'error' in result
