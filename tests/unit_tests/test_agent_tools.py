"""Unit tests for the LangChain tools and the agent graph."""

from unittest.mock import Mock, patch

from hedera_dex.config_models import DexSettings
from hedera_dex.premade import build_graph
from hedera_dex.tools.agent_tools import (
    dex_tools,
    get_dex_status,
    list_pools,
    swap_tokens_tool,
)


class TestAgentTools:
    """Test the tools the agent calls."""

    def test_tool_names(self):
        assert [t.name for t in dex_tools] == [
            "list_pools",
            "get_pool_info",
            "swap_tokens",
            "get_dex_status",
        ]

    @patch("hedera_dex.tools.agent_tools.load_settings")
    def test_list_pools_demo_mode(self, mock_load_settings):
        mock_load_settings.return_value = DexSettings(demo_mode=True)

        result = list_pools.invoke({})

        assert "SaucerSwap V2 Liquidity Pools (mainnet)" in result
        assert "Data source: Demo Mode (Mock Data)" in result

    @patch("hedera_dex.tools.agent_tools.load_settings")
    def test_swap_tokens_simulates_without_wallet(self, mock_load_settings):
        mock_load_settings.return_value = DexSettings()

        result = swap_tokens_tool.invoke({"amount": 10, "from_token": "hbar", "to_token": "usdt"})

        assert "**Token Swap Simulation** (mainnet)" in result
        assert "~1.188000 USDT" in result

    @patch("hedera_dex.tools.agent_tools.load_settings")
    def test_get_dex_status(self, mock_load_settings):
        mock_load_settings.return_value = DexSettings(network="testnet")

        result = get_dex_status.invoke({})

        assert "active on testnet network" in result
        assert result.endswith("(swaps: simulation)")


class TestGraph:
    """Test wiring of the ReAct agent."""

    @patch("hedera_dex.premade.create_react_agent")
    def test_build_graph_with_model(self, mock_create_react_agent):
        model = Mock()

        build_graph(model)

        _, kwargs = mock_create_react_agent.call_args
        assert kwargs["model"] is model
        assert kwargs["tools"] is dex_tools
        assert "SaucerSwap" in kwargs["prompt"]

    @patch("hedera_dex.premade.create_react_agent")
    @patch("hedera_dex.premade.ChatOpenAI")
    def test_build_graph_default_model(self, mock_chat_openai, mock_create_react_agent):
        build_graph()

        mock_chat_openai.assert_called_once_with(model="gpt-4o-mini", max_tokens=None)
        assert mock_create_react_agent.call_args[1]["model"] is mock_chat_openai.return_value
