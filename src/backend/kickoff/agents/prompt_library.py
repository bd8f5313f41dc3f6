"""Prompt texts surfaced by the wizard at each step."""

from pathlib import Path

from kickoff.models.conversation import WizardStep
from kickoff.models.project import ProjectRecord

# Paths to prompt files
PROMPTS_DIR = Path(__file__).parent / "prompts"

WELCOME_PROMPT_FILE = "welcome.md"
RESTART_PROMPT_FILE = "restart.md"

STEP_PROMPT_FILES = {
    WizardStep.NAME: WELCOME_PROMPT_FILE,
    WizardStep.DESCRIPTION: "description.md",
    WizardStep.DEADLINE: "deadline.md",
    WizardStep.PRIORITY: "priority.md",
    WizardStep.TEAM: "team.md",
    WizardStep.CONFIRMATION: "confirmation.md",
    WizardStep.TERMINAL: "terminal.md",
}


def load_prompt(filename: str) -> str:
    """Load a prompt from the prompts directory."""
    prompt_path = PROMPTS_DIR / filename
    with open(prompt_path, encoding="utf-8") as f:
        return f.read().strip()


def step_prompt(step: WizardStep, record: ProjectRecord) -> str:
    """Return the prompt that asks for the given step's input.

    The confirmation prompt embeds a summary of the record.
    """
    filename = STEP_PROMPT_FILES.get(step)
    if filename is None:
        raise KeyError(f"No prompt for step: {step}")
    prompt = load_prompt(filename)
    if step == WizardStep.CONFIRMATION:
        prompt = prompt.format(summary=render_project_summary(record))
    return prompt


def render_project_summary(record: ProjectRecord) -> str:
    """Render the project collected so far as a readable block."""
    lines = [
        f"📋 Name: {record.name}",
        f"📝 Description: {record.description}",
        f"📅 Deadline: {record.deadline}",
        f"⚡ Priority: {record.priority}",
        f"📊 Status: {record.status}",
    ]

    if record.team:
        lines.append("👥 Team:")
        for member in record.team:
            full_name = " ".join(part for part in (member.name, member.lastname) if part)
            lines.append(f"  - {full_name} <{member.email}> ({member.role})")
    else:
        lines.append("👥 Team: only you")

    lines.append(f"💰 Budget: {record.budget} (spent: {record.spent})")
    lines.append(f"🔒 Confidentiality: {record.confidentiality}")
    return "\n".join(lines)
