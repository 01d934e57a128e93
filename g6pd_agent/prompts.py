# g6pd_agent/prompts.py
"""Prompt template for the G6PD safety classifier."""

KNOWN_TRIGGERS = (
    "fava beans",
    "mothballs (naphthalene)",
    "certain antibiotics (sulfonamides, nitrofurantoin)",
    "antimalarials (primaquine)",
    "aspirin in high doses",
    "vitamin C supplements in high doses",
    "menthol",
    "henna",
)

PROMPT_TEMPLATE = """You are a G6PD deficiency safety expert. Analyze this food/medication for G6PD safety: "{input}"

Respond ONLY with valid JSON in this exact format (no markdown, no backticks):
{{
  "item": "name of the item",
  "safety": "safe" or "unsafe" or "caution",
  "reason": "brief explanation",
  "alternatives": ["alternative 1", "alternative 2"],
  "severity": "low" or "medium" or "high"
}}

Consider these G6PD triggers: {triggers}."""


def build_prompt(text: str) -> str:
    """Renders the classification prompt for one substance name."""
    return PROMPT_TEMPLATE.format(input=text, triggers=", ".join(KNOWN_TRIGGERS))
