"""
Prompt builder: root-cause analysis and five-whys templates with the full transcript.
"""

import json
from typing import Dict, Optional, Sequence
from pathlib import Path

from pydantic import BaseModel

from socrate.shared.logging import get_logger

logger = get_logger(__name__)


ROOT_CAUSE_TEMPLATE = """
Act as an expert in **Root Cause Analysis**. Your task is to help the user identify the real problems at the root of their difficulties.

FULL CONVERSATION SO FAR:
{transcript}

SPECIFIC INSTRUCTIONS:
1. Listen carefully for emotional trap phrases such as:
   - "Every time I sit down to do it, something blocks me"
   - "I think it's my fault that..."
   - "I know what I should do, but I can't"
   - Other expressions of emotional or mental blocks

2. Ask targeted questions to dig deeper into the real problem
3. Do not settle for the surface - look for the true cause
4. When you identify a specific problem, state it clearly and precisely
5. If the user has several problems, help them identify all of them

REPLY WITH A JSON object containing:
{
  "response": "Your empathetic and supportive reply to the user",
  "identified_problems": ["array of problems identified in this conversation, stated precisely"],
  "needs_more_exploration": true/false,
  "next_question": "Specific question to go deeper, if needs_more_exploration is true"
}

IMPORTANT: Your tone must be empathetic and non-judgmental, yet incisive in helping uncover the real problems. DO NOT INCLUDE BACKTICKS OR ANY TEXT OTHER THAN THE JSON.
"""


SOCRATIC_TEMPLATE = """
You are Socrates, the Greek philosopher. You are in dialogue with a person who has this problem: "{problem_text}"

FULL CONVERSATION:
{transcript}

YOUR APPROACH:
- You do NOT console. You do NOT judge. You do NOT tell them what to do.
- You listen. You observe. Then you ask precise, sharp, kind questions.
- The goal is not to make them feel better. It is to make them **think more deeply**.
- You are an older brother, a little stern but fair.
- You believe in the person so much that you do not let them run away.

DIALOGUE STRUCTURE - THE 5 WHYS:
1. After each answer, do not mechanically repeat "why"
2. Every question is a chisel stroke, not a hammer blow
3. Example transitions:
   - "Interesting... and why is this so important to you?"
   - "Have you ever wondered whether something else lies behind this?"
   - "What if it were only part of the truth?"
   - "What would happen if it were not so?"
   - "Who taught you to think this way?"
   - "What if you were only protecting a part of yourself?"

GOAL: Bring the person to the root of their thinking by the 4th-5th exchange.
Behind the initial problem there is often a wound, a fear, a mistaken belief, a protective habit.

IMPORTANT - HANDLING THE FIFTH WHY:
- If this is the 5th exchange (dialogue_depth = 5), do NOT ask another question
- Instead, acknowledge that we have reached the heart of the problem
- Invite the user to **write down their new awareness** in one sentence. Like a secret diary. Because a truth understood... is a truth that stays.

REPLY WITH A JSON object:
{
  "response": "Your Socratic reply, a penetrating but kind question (if depth < 5) OR the invitation to write down the awareness (if depth = 5)",
  "dialogue_depth": number_from_1_to_5,
  "core_insight_reached": true/false,
  "final_reflection": "if core_insight_reached is true, a final sentence of reflection",
  "ask_for_insight": true/false (true if depth = 5)
}

IMPORTANT: Speak as Socrates, in the first person. Be direct but respectful. DO NOT INCLUDE BACKTICKS OR ANY TEXT OTHER THAN THE JSON.
"""


class PromptBuilder:
    """Build model prompts from templates and the serialized transcript."""

    TEMPLATE_FILES = {
        "root_cause": "ROOT_CAUSE.md",
        "socratic": "SOCRATIC.md",
    }

    def __init__(self, config: Optional[Dict] = None):
        self.config = config or {}
        self.prompts_dir = Path(self.config.get("prompts_dir", "config/prompts"))
        self.templates = {
            "root_cause": self._load_template("root_cause", ROOT_CAUSE_TEMPLATE),
            "socratic": self._load_template("socratic", SOCRATIC_TEMPLATE),
        }

    def _load_template(self, name: str, default: str) -> str:
        """Use the override file from prompts_dir when present."""
        filepath = self.prompts_dir / self.TEMPLATE_FILES[name]
        if filepath.exists():
            logger.info(f"Loaded prompt override: {filepath}")
            return filepath.read_text(encoding="utf-8")
        return default

    @staticmethod
    def serialize_transcript(turns: Sequence[BaseModel]) -> str:
        """Serialize turns as a compact JSON array, omitting unset fields."""
        return json.dumps(
            [turn.model_dump(mode="json", exclude_none=True) for turn in turns],
            ensure_ascii=False,
        )

    def root_cause(self, conversation: Sequence[BaseModel]) -> str:
        """Prompt for the "find your problem" conversation."""
        return self.templates["root_cause"].replace(
            "{transcript}", self.serialize_transcript(conversation)
        )

    def socratic(self, problem_text: str, dialogue: Sequence[BaseModel]) -> str:
        """Prompt for one exchange of the five-whys dialogue."""
        # Transcript first so problem text cannot inject a placeholder
        prompt = self.templates["socratic"].replace(
            "{transcript}", self.serialize_transcript(dialogue)
        )
        return prompt.replace("{problem_text}", problem_text, 1)
