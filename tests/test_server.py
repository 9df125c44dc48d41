"""Tests for server module."""

from unittest.mock import AsyncMock, patch

import pytest

from claude_run_supervisor import server


class TestMcpToolsRegistration:
    """Tests for MCP tools registration."""

    def test_mcp_tools_registration(self):
        assert server.mcp is not None
        assert server.mcp.name == "Claude Run Supervisor"

        assert callable(server.run_claude)
        assert callable(server.check_status)

    @pytest.mark.asyncio
    async def test_tools_listed(self):
        tools = await server.mcp.list_tools()

        assert {tool.name for tool in tools} == {"run_claude", "check_status"}


class TestRunClaudeMcp:
    """Tests for run_claude MCP tool."""

    @pytest.mark.asyncio
    async def test_run_claude_mcp(self):
        mock_result = {"success": True, "outcome": "success", "session_id": "s-1"}
        mock_impl = AsyncMock(return_value=mock_result)

        with patch("claude_run_supervisor.server.run_claude_impl", mock_impl):
            result = await server.run_claude(
                prompt="Fix the bug",
                cwd="/tmp/project",
                model="opus",
                resume="s-0",
            )

        assert result == mock_result
        mock_impl.assert_called_once_with(
            prompt="Fix the bug",
            cwd="/tmp/project",
            system_prompt="",
            model="opus",
            resume="s-0",
            timeout=None,
        )


class TestCheckStatusMcp:
    """Tests for check_status MCP tool."""

    def test_check_status_mcp(self):
        mock_result = {"claude_available": True, "config_loaded": True}

        with patch("claude_run_supervisor.server.check_status_impl", return_value=mock_result):
            result = server.check_status()

        assert result == mock_result


class TestMain:
    """Tests for main() entry point."""

    def test_main_runs_server(self):
        with patch.object(server.mcp, "run") as mock_run:
            server.main()

        mock_run.assert_called_once_with()
