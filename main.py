# =============================================================================
# main.py  -  Entry Point for the Scryfall Card Advisor Agent
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#
# WHAT HAPPENS:
#   1. Loads .env (OPENROUTER_API_KEY, SCRYFALL_* settings)
#   2. Creates the Google ADK agent (agent/card_agent.py), which spawns the
#      Scryfall MCP tool server as a subprocess
#   3. Reads questions from the console and streams each one to the agent
#   4. Prints tool calls as they happen and the agent's final answer
# =============================================================================

import asyncio

from dotenv import load_dotenv

# Must run before the agent is created: LiteLlm reads the API key from the
# environment when it initialises.
load_dotenv()

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from agent.card_agent import create_agent

APP_NAME = "scryfall_advisor"
USER_ID = "console_user"
QUIT_WORDS = ("quit", "exit", "q")
RULE = "-" * 70


async def ask(runner: Runner, session_id: str, question: str) -> str:
    """Send one question and return the last text the agent produced.

    Tool calls are echoed as they stream past so the user can see which
    Scryfall endpoints the agent is hitting.
    """
    message = types.Content(role="user", parts=[types.Part(text=question)])

    answer = ""
    async for event in runner.run_async(
        user_id=USER_ID,
        session_id=session_id,
        new_message=message,
    ):
        if not (event.content and event.content.parts):
            continue
        for part in event.content.parts:
            if getattr(part, "function_call", None):
                print(f"  🔧 {part.function_call.name}({dict(part.function_call.args or {})})")
            if getattr(part, "text", None):
                answer = part.text
    return answer


async def run_agent():
    """Run the card advisor interactively until the user quits."""
    print("=" * 70)
    print("  SCRYFALL CARD ADVISOR")
    print("  Google ADK agent + FastMCP tools + api.scryfall.com")
    print("=" * 70)

    print("\n🔧 Starting agent and Scryfall tool server...")
    session_service = InMemorySessionService()
    runner = Runner(
        agent=create_agent(),
        app_name=APP_NAME,
        session_service=session_service,
    )
    session = await session_service.create_session(app_name=APP_NAME, user_id=USER_ID)

    print("✅ Ready. Ask about any Magic: The Gathering card, set, ruling or symbol.")
    print(f"   (Type {' / '.join(QUIT_WORDS)} to exit)\n")

    while True:
        try:
            question = input("\n🧑 You: ").strip()
        except (EOFError, KeyboardInterrupt):
            question = "quit"

        if question.lower() in QUIT_WORDS:
            print("\n👋 Goodbye!")
            break
        if not question:
            continue

        print(RULE)
        answer = await ask(runner, session.id, question)
        print(RULE)
        if answer:
            print(f"\n🤖 Agent:\n\n{answer}")
        else:
            print("\n⚠️  No response generated. Check the tool server log above.")


if __name__ == "__main__":
    asyncio.run(run_agent())
