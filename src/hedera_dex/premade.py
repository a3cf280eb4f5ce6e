"""Hedera DEX agent: a ReAct agent over the SaucerSwap tools."""

import logging

from langchain_openai import ChatOpenAI
from langgraph.prebuilt import create_react_agent

from .config_loader import get_config
from .tools.agent_tools import dex_tools

logger = logging.getLogger(__name__)

system_prompt = """
You are a Hedera DEX assistant for SaucerSwap V2.
Use the tools provided to list liquidity pools, look up pools by token pair
and swap tokens.

Key points:
- Token symbols are upper case (HBAR, WHBAR, USDC, SAUCE). HBAR trades as WHBAR.
- Fee tiers are in hundredths of a basis point: 3000 means 0.30%
- Pool lists may come from demo data; always repeat the data source to the user
- Swaps run as simulations unless wallet credentials are configured.
  Say so whenever the swap tool reports a simulation.
"""


def build_graph(model=None):
    """Create the ReAct agent graph.

    Args:
        model: Chat model to use. Defaults to the model configured in models.yaml.
    """
    if model is None:
        model_config = get_config().models
        logger.info(f"Loading model {model_config.model_name} from {model_config.provider}")
        model = ChatOpenAI(
            model=model_config.model_name,
            max_tokens=model_config.max_tokens,
        )

    return create_react_agent(model=model, tools=dex_tools, prompt=system_prompt)
