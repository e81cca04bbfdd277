# =============================================================================
# agent/travel_agent.py  —  Google ADK Agent Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Creates the Google ADK agent that receives user requests, calls the MCP
#   search tools, and answers.  The LLM is reached through LiteLlm, so any
#   provider LiteLLM supports can be used by changing AGENT_MODEL.
#
#   ┌──────────────────────────┐      stdio       ┌──────────────────────────┐
#   │  Google ADK Agent        │ ───────────────▶ │  FastMCP Server          │
#   │  prompt + LiteLlm model  │                  │  (tools/mcp_server.py)   │
#   └──────────────────────────┘                  │  • brightdata_web_search │
#                                                 │  • get_flights           │
#                                                 │  • get_hotels            │
#                                                 └────────────┬─────────────┘
#                                                              ▼
#                                                 ┌──────────────────────────┐
#                                                 │  core/ (pure Python)     │
#                                                 └──────────────────────────┘
#
# MCP CONNECTION:
#   ADK starts the tool server as a subprocess with the SAME interpreter
#   that runs the agent (sys.executable), from the project root, so the
#   subprocess sees the same installed packages and the same .env file.
# =============================================================================

import os
import sys
from typing import Optional

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from agent.prompt import get_travel_agent_prompt
from core.config import Settings, load_settings

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def mcp_server_parameters() -> StdioServerParameters:
    """How ADK launches the tool server subprocess."""
    return StdioServerParameters(
        command=sys.executable,
        args=["-m", "tools.mcp_server"],
        cwd=PROJECT_ROOT,
    )


def create_agent(settings: Optional[Settings] = None) -> Agent:
    """Create the travel agent wired to the MCP search tools.

    The model string is read from AGENT_MODEL (default
    "openrouter/openai/gpt-4o"); LiteLlm reads the matching API key
    (e.g. OPENROUTER_API_KEY) from the environment.
    """
    settings = settings or load_settings()

    mcp_tools = MCPToolset(connection_params=mcp_server_parameters())

    return Agent(
        name="travel_agent",
        model=LiteLlm(model=settings.agent_model),
        instruction=get_travel_agent_prompt(),
        tools=[mcp_tools],
    )
