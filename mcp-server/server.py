#!/usr/bin/env python3
"""MCP Server for the Savings Allocator.

This server exposes the allocation calculator as MCP tools, allowing AI
assistants to adjust allocations and answer questions about take-home pay,
taxes and IRS contribution limits.
"""

import os
import sys
import json
import asyncio
import logging
from typing import Any

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from tools import SavingsAllocatorTools
from storage.allocation_store import DEFAULT_DATA_DIR


logger = logging.getLogger(__name__)

# Create the MCP server
server = Server("savings-allocator")

# Global tools instance (initialized on first tool call)
tools: SavingsAllocatorTools | None = None


def get_tools() -> SavingsAllocatorTools:
    """Get or initialize the tools instance."""
    global tools
    if tools is None:
        # Data directory and tax year can be set via environment variables
        data_dir = os.environ.get('SAVINGS_ALLOCATOR_DATA_DIR', DEFAULT_DATA_DIR)
        tax_year = os.environ.get('SAVINGS_ALLOCATOR_TAX_YEAR')
        tools = SavingsAllocatorTools(data_dir, int(tax_year) if tax_year else None)
    return tools


ALLOCATION_PARAM = {
    "type": "string",
    "enum": ["traditional401k", "roth401k", "hsa", "rothIRA", "emergencyFund", "taxableBrokerage"],
    "description": "The allocation to set"
}


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available savings allocator tools."""
    return [
        Tool(
            name="get_allocation_state",
            description="Get the current inputs: gross salary, effective tax rate, monthly health insurance premium, HSA coverage type and the six allocation percentages.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="set_gross_salary",
            description="Set gross annual salary in dollars. Allocation percents are not re-clamped when salary changes.",
            inputSchema={
                "type": "object",
                "properties": {
                    "dollars": {
                        "type": "number",
                        "description": "Gross annual salary in dollars"
                    }
                },
                "required": ["dollars"]
            }
        ),
        Tool(
            name="set_tax_rate",
            description="Set the flat effective tax rate as a percent (clamped to 0-50).",
            inputSchema={
                "type": "object",
                "properties": {
                    "percent": {
                        "type": "number",
                        "description": "Effective tax rate percent, e.g. 22"
                    }
                },
                "required": ["percent"]
            }
        ),
        Tool(
            name="set_health_insurance_premium",
            description="Set the monthly health insurance premium in dollars. It is deducted pre-tax.",
            inputSchema={
                "type": "object",
                "properties": {
                    "dollars": {
                        "type": "number",
                        "description": "Monthly premium in dollars"
                    }
                },
                "required": ["dollars"]
            }
        ),
        Tool(
            name="set_hsa_coverage_type",
            description="Set HSA coverage to individual or family. Changes the HSA limit and lowers the HSA allocation if it exceeds the new limit.",
            inputSchema={
                "type": "object",
                "properties": {
                    "coverage_type": {
                        "type": "string",
                        "enum": ["individual", "family"],
                        "description": "HSA coverage type"
                    }
                },
                "required": ["coverage_type"]
            }
        ),
        Tool(
            name="set_allocation",
            description="Set an allocation as a percent of gross salary. The value is clamped to 0-100 and to the IRS limit; traditional and Roth 401(k) share one combined limit. Returns the applied percent.",
            inputSchema={
                "type": "object",
                "properties": {
                    "allocation": ALLOCATION_PARAM,
                    "percent": {
                        "type": "number",
                        "description": "Requested percent of gross salary"
                    }
                },
                "required": ["allocation", "percent"]
            }
        ),
        Tool(
            name="get_breakdown",
            description="Get the gross-to-take-home breakdown: pre-tax deductions, taxable income, estimated taxes, post-tax deductions, take-home pay (may be negative) and savings rate.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="get_limits",
            description="Get IRS contribution limits for the tax year, the combined 401(k) usage and each allocation's current maximum percent.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="reset_allocations",
            description="Reset all inputs to defaults and delete saved data. This cannot be undone.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        )
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        sa_tools = get_tools()

        if name == "get_allocation_state":
            result = sa_tools.get_allocation_state()
        elif name == "set_gross_salary":
            result = sa_tools.set_gross_salary(arguments["dollars"])
        elif name == "set_tax_rate":
            result = sa_tools.set_tax_rate(arguments["percent"])
        elif name == "set_health_insurance_premium":
            result = sa_tools.set_health_insurance_premium(arguments["dollars"])
        elif name == "set_hsa_coverage_type":
            result = sa_tools.set_hsa_coverage_type(arguments["coverage_type"])
        elif name == "set_allocation":
            result = sa_tools.set_allocation(arguments["allocation"], arguments["percent"])
        elif name == "get_breakdown":
            result = sa_tools.get_breakdown()
        elif name == "get_limits":
            result = sa_tools.get_limits()
        elif name == "reset_allocations":
            result = sa_tools.reset_allocations()
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(
            type="text",
            text=json.dumps(result, indent=2, default=str)
        )]
    except Exception as e:
        logger.exception("Tool %s failed", name)
        return [TextContent(
            type="text",
            text=json.dumps({"error": str(e)}, indent=2)
        )]


async def main():
    """Run the MCP server."""
    # stdout carries the MCP protocol; logs go to stderr
    logging.basicConfig(level=logging.WARNING, stream=sys.stderr)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(main())
