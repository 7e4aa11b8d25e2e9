"""
Tests for prompt builder.
"""

import json

from socrate.core.models import Turn, SocraticTurn
from socrate.core.prompt.builder import PromptBuilder


def test_root_cause_prompt_contains_contract(prompt_builder):
    prompt = prompt_builder.root_cause([Turn(role="user", text="I feel stuck")])

    assert "Root Cause Analysis" in prompt
    assert '"response"' in prompt
    assert '"identified_problems"' in prompt
    assert '"needs_more_exploration"' in prompt
    assert '"next_question"' in prompt
    assert "{transcript}" not in prompt


def test_transcript_serialized_without_unset_fields(prompt_builder):
    turns = [
        Turn(role="user", text="Ciao, è difficile"),
        Turn(role="assistant", text="Why?", identified_problems=["A"], needs_more_exploration=True),
    ]

    serialized = json.loads(PromptBuilder.serialize_transcript(turns))

    assert serialized[0] == {"role": "user", "text": "Ciao, è difficile"}
    assert serialized[1]["identified_problems"] == ["A"]
    assert "è" in prompt_builder.root_cause(turns)


def test_socratic_prompt_embeds_problem_and_dialogue(prompt_builder):
    dialogue = [
        SocraticTurn(role="socrate", text="Why is this a problem?"),
        SocraticTurn(role="user", text="Because {transcript} scares me"),
    ]

    prompt = prompt_builder.socratic("Fear of {problem_text}", dialogue)

    assert '"Fear of {problem_text}"' in prompt
    assert "Because {transcript} scares me" in prompt
    assert '"dialogue_depth"' in prompt
    assert '"ask_for_insight"' in prompt


def test_override_template_loaded(tmp_path):
    prompts_dir = tmp_path / "prompts"
    prompts_dir.mkdir()
    (prompts_dir / "ROOT_CAUSE.md").write_text("CUSTOM {transcript}", encoding="utf-8")

    builder = PromptBuilder({"prompts_dir": str(prompts_dir)})

    prompt = builder.root_cause([Turn(role="user", text="hi")])
    assert prompt.startswith("CUSTOM [")
    # Missing override falls back to the built-in template
    assert "Socrates" in builder.socratic("X", [])
