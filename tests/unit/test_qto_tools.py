"""Tests for the takeoff MCP tool handlers."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from mcp.server import Server

from ifc_qto.presentation.server import create_server
from ifc_qto.presentation.tools import dispatch_qto_tool


@pytest.fixture
def office_file(tmp_path: Path, office_model) -> str:
    """Office model written to disk."""
    return str(office_model.write(tmp_path / "office.ifc"))


class TestSpaceQtoTool:
    """Tests for ifc_space_qto."""

    @pytest.mark.asyncio
    async def test_json_rows(self, office_file: str) -> None:
        """Test rows are returned as JSON."""
        [content] = await dispatch_qto_tool("ifc_space_qto", {"file_path": office_file})

        data = json.loads(content.text)
        assert data["count"] == 2
        assert data["rows"][0]["Area"] == 12.5
        assert data["rows"][0]["Volume"] == 37.5

    @pytest.mark.asyncio
    async def test_options_are_applied(self, office_file: str) -> None:
        """Test extra_params, rename_map and round reach the service."""
        [content] = await dispatch_qto_tool(
            "ifc_space_qto",
            {
                "file_path": office_file,
                "extra_params": ["Reference"],
                "rename_map": {"Area": "NetArea"},
                "round": 0,
                "use_geometry": False,
            },
        )

        row = json.loads(content.text)["rows"][0]
        assert row["NetArea"] == 12.0
        assert row["Reference"] == "R-101"

    @pytest.mark.asyncio
    async def test_markdown(self, office_file: str) -> None:
        """Test the markdown table output."""
        [content] = await dispatch_qto_tool(
            "ifc_space_qto", {"file_path": office_file, "format": "markdown"},
        )

        assert content.text.startswith("# Space Quantity Takeoff")
        assert "| id | GlobalId | Name | LongName | Area | Volume |" in content.text
        assert "12.5" in content.text

    @pytest.mark.asyncio
    async def test_missing_file_is_reported(self, tmp_path: Path) -> None:
        """Test errors become an error text response."""
        [content] = await dispatch_qto_tool("ifc_space_qto", {"file_path": str(tmp_path / "x.ifc")})

        assert content.text.startswith("Error: IFC file not found")

    @pytest.mark.asyncio
    async def test_invalid_option_is_reported(self, office_file: str) -> None:
        """Test option validation errors are reported."""
        [content] = await dispatch_qto_tool("ifc_space_qto", {"file_path": office_file, "round": 42})

        assert content.text.startswith("Error: Validation error for 'round'")


class TestListingTools:
    """Tests for ifc_explore_parameters and ifc_export_attributes."""

    @pytest.mark.asyncio
    async def test_explore_parameters(self, office_file: str) -> None:
        """Test parameter keys are listed."""
        [content] = await dispatch_qto_tool("ifc_explore_parameters", {"file_path": office_file})

        data = json.loads(content.text)
        names = [parameter["name"] for parameter in data["parameters"]]
        assert names[0] == "Space.Name"
        assert "Pset_SpaceCommon.Reference" in names

    @pytest.mark.asyncio
    async def test_export_attributes(self, office_file: str) -> None:
        """Test attributes are exported in the long layout."""
        [content] = await dispatch_qto_tool(
            "ifc_export_attributes",
            {"file_path": office_file, "ifc_types": ["IfcSpace"], "layout": "long"},
        )

        data = json.loads(content.text)
        assert data["layout"] == "long"
        assert any(row["key"] == "Core.Name" and row["value"] == "101" for row in data["rows"])

    @pytest.mark.asyncio
    async def test_unknown_tool(self) -> None:
        """Test unknown tool names."""
        [content] = await dispatch_qto_tool("ifc_nope", {})

        assert content.text == "Unknown tool: ifc_nope"


class TestServer:
    """Tests for server construction."""

    def test_create_server(self) -> None:
        """Test the server is created with the configured name."""
        server = create_server()

        assert isinstance(server, Server)
        assert server.name == "ifc_qto"
