"""
Simulation of an AI Agent using termexec.

The agent (simulated here) generates commands dynamically. termexec runs
them, refuses the ones the policy does not allow, and explains failures
so the agent can correct itself.
"""

import asyncio
from dataclasses import dataclass

from termexec import CommandPolicy, PolicyViolation, create_command_tool
from termexec.formatting import render_text


@dataclass
class AgentAction:
    thought: str
    command: str
    timeout_ms: int | None = None


ACTIONS = [
    AgentAction(thought="I need to see what files are here.", command="ls -la"),
    AgentAction(
        thought="I'll create a python script.",
        command="echo 'print(\"Hello World\")' > hello.py",
    ),
    AgentAction(thought="Let me run the script.", command="python3 hello.py"),
    # Typo: classified as COMMAND_NOT_FOUND with a hint
    AgentAction(thought="Let me run it again.", command="pyhton3 hello.py"),
    # Runs forever: killed at the deadline and reported as TIMEOUT
    AgentAction(thought="Wait for the server.", command="sleep 60", timeout_ms=1_000),
    # Refused by the policy, never executed
    AgentAction(thought="Clean everything up.", command="rm -rf ./workspace"),
]


async def main():
    print("🤖 Agent initializing...\n")

    from pathlib import Path
    Path("./workspace").mkdir(parents=True, exist_ok=True)

    policy = CommandPolicy.deny({"rm", "sudo", "dd"})
    async with create_command_tool(cwd="./workspace", policy=policy) as toolkit:
        for action in ACTIONS:
            print(f"🤖 Thought: {action.thought}")
            try:
                result = await toolkit.execute(action.command, timeout_ms=action.timeout_ms)
            except PolicyViolation as exc:
                print(f"🚫 Blocked: {exc.reason}")
            else:
                print(render_text(result))
            print("-" * 50)

    print("✅ Agent finished task.")


if __name__ == "__main__":
    asyncio.run(main())
