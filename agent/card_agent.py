# =============================================================================
# agent/card_agent.py  -  Google ADK Agent Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Configures the Google ADK agent that answers Magic: The Gathering card
#   questions by calling the Scryfall MCP tools.
#
# HOW IT FITS TOGETHER:
#
#   ┌──────────────────────────────────────────────┐
#   │              Google ADK Agent                │
#   │   system prompt  ──▶  LLM (via LiteLlm)      │
#   │                         │                    │
#   │                  calls tools over MCP        │
#   └─────────────────────────┼────────────────────┘
#                             ▼
#                ┌──────────────────────────┐
#                │  FastMCP server          │
#                │  (tools/mcp_server.py)   │
#                └────────────┬─────────────┘
#                             ▼
#                ┌──────────────────────────┐
#                │  core/  client+formatter │
#                └────────────┬─────────────┘
#                             ▼
#                      api.scryfall.com
#
# MCP CONNECTION:
#   ADK starts the tool server as a subprocess and talks to it over
#   stdin/stdout.  We launch it with "uv run" from the project root so the
#   subprocess uses the project's virtual environment.
#
# MODEL:
#   Any LiteLlm model string works.  The default routes GPT-4o through
#   OpenRouter; override with SCRYFALL_AGENT_MODEL.  LiteLlm reads the
#   provider key (e.g. OPENROUTER_API_KEY) from the environment.
# =============================================================================

import os

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from agent.prompt import get_card_advisor_prompt

DEFAULT_MODEL = "openrouter/openai/gpt-4o"


def create_agent() -> Agent:
    """Create the card advisor agent, wired to the Scryfall tool server.

    Returns:
        A configured Google ADK Agent instance.
    """
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    mcp_tools = MCPToolset(
        connection_params=StdioServerParameters(
            command="uv",
            args=["run", "python", "-m", "tools.mcp_server"],
            cwd=project_root,
            env={**os.environ},
        ),
    )

    return Agent(
        name="scryfall_card_advisor",
        model=LiteLlm(model=os.environ.get("SCRYFALL_AGENT_MODEL", DEFAULT_MODEL)),
        instruction=get_card_advisor_prompt(),
        tools=[mcp_tools],
    )
