"""Tests for server entry point and async server."""

import logging
from unittest.mock import MagicMock, patch

import pytest

from chuk_mcp_maps.constants import ALL_TOOLS, ServerConfig


class TestAsyncServer:
    def test_registers_all_tools(self):
        from chuk_mcp_maps.async_server import create_server

        mcp, _ = create_server(provider="osm")
        assert sorted(t.name for t in mcp.get_tools()) == sorted(ALL_TOOLS)

    def test_provider_normalized(self):
        from chuk_mcp_maps.async_server import create_server

        _, maps = create_server(provider="  OpenStreetMap ")
        assert maps.provider_name == "OpenStreetMap"

    def test_health_reports_provider(self):
        from chuk_mcp_maps.async_server import create_server

        mcp, _ = create_server(provider="riskscape", riskscape_api_key="key")
        health = mcp.health()
        assert health["provider"] == "RiskScape"
        assert health["server"] == ServerConfig.NAME
        assert health["tools"] == len(ALL_TOOLS)

    def test_missing_key_warns(self, caplog):
        from chuk_mcp_maps.async_server import create_server

        with caplog.at_level(logging.WARNING):
            create_server(provider="google")
        assert "No Google Maps API key" in caplog.text

    def test_unknown_provider(self):
        from chuk_mcp_maps.async_server import create_server

        with pytest.raises(ValueError, match="Unknown map provider"):
            create_server(provider="bing")

    def test_transport_settings_applied(self):
        from chuk_mcp_maps.async_server import create_server

        mcp, _ = create_server(provider="osm", unknown_session_policy="reject")
        assert mcp.session_manager._unknown_session_policy == "reject"

    async def test_close_releases_provider(self):
        from chuk_mcp_maps.async_server import create_server

        mcp, maps = create_server(provider="osm")
        with patch.object(maps.provider, "close") as close:
            await mcp.close()
        close.assert_awaited_once()


class TestServerModule:
    def test_main_exists(self):
        from chuk_mcp_maps.server import main

        assert callable(main)

    @patch("chuk_mcp_maps.server.create_server")
    def test_main_defaults(self, mock_create):
        from chuk_mcp_maps.server import main

        mock_mcp = MagicMock()
        mock_create.return_value = (mock_mcp, MagicMock())
        with patch.dict("os.environ", {}, clear=True):
            main([])
        kwargs = mock_create.call_args.kwargs
        assert kwargs["provider"] == "google"
        assert kwargs["tool_timeout"] == 30.0
        assert kwargs["unknown_session_policy"] == "create"
        mock_mcp.run.assert_called_once_with(host="0.0.0.0", port=3000)  # noqa: S104

    @patch("chuk_mcp_maps.server.create_server")
    def test_main_arguments(self, mock_create):
        from chuk_mcp_maps.server import main

        mock_mcp = MagicMock()
        mock_create.return_value = (mock_mcp, MagicMock())
        with patch.dict("os.environ", {}, clear=True):
            main(["-p", "9999", "-r", "OSM", "--tool-timeout", "5", "--unknown-session", "reject"])
        kwargs = mock_create.call_args.kwargs
        assert kwargs["provider"] == "osm"
        assert kwargs["tool_timeout"] == 5.0
        assert kwargs["unknown_session_policy"] == "reject"
        mock_mcp.run.assert_called_once_with(host="0.0.0.0", port=9999)  # noqa: S104

    @patch("chuk_mcp_maps.server.create_server")
    def test_main_env(self, mock_create):
        from chuk_mcp_maps.server import main

        mock_mcp = MagicMock()
        mock_create.return_value = (mock_mcp, MagicMock())
        env = {
            "MCP_SERVER_PORT": "4100",
            "MAP_API_PROVIDER": "riskscape",
            "RISKSCAPE_API_KEY": "rs-key",
            "MCP_SESSION_IDLE_TIMEOUT": "not-a-number",
        }
        with patch.dict("os.environ", env, clear=True):
            main([])
        kwargs = mock_create.call_args.kwargs
        assert kwargs["provider"] == "riskscape"
        assert kwargs["riskscape_api_key"] == "rs-key"
        assert kwargs["session_idle_timeout"] == 1800.0
        mock_mcp.run.assert_called_once_with(host="0.0.0.0", port=4100)  # noqa: S104

    def test_main_rejects_unknown_provider(self):
        from chuk_mcp_maps.server import main

        with pytest.raises(SystemExit) as exc:
            main(["-r", "bing"])
        assert exc.value.code == 2

    @patch("chuk_mcp_maps.server.create_server", side_effect=ValueError("bad"))
    def test_main_exits_on_config_error(self, mock_create):
        from chuk_mcp_maps.server import main

        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 1
