"""
Ad Reference Analyzer prompt.

Text-only creative breakdown of a video ad: the model never sees frames, so the
prompt pins it to the supplied transcript/caption, fixes the JSON shape, and
states per-field item counts. The counts are instructions to the model only;
nothing downstream enforces them.
"""

from __future__ import annotations

UNKNOWN_VISUAL = "UNKNOWN"
NO_DIALOGUE = "NONE"

# field -> (min, max, qualifier)
FIELD_CARDINALITY = {
    "scene_descriptions": (6, 10, ""),
    "candidate_hooks": (8, 10, ""),
    "candidate_pains": (8, 10, ""),
    "candidate_shows": (8, 10, ""),
    "ctas": (6, 10, ""),
    "key_lines": (8, 12, " if possible"),
}

RESULT_ARRAY_FIELDS = (
    "scene_descriptions",
    "key_lines",
    "candidate_hooks",
    "candidate_pains",
    "candidate_shows",
    "ctas",
)

AD_SUMMARY_TEMPLATE = '''You are an "Ad Reference Analyzer".

You ONLY have the provided transcript/caption text. You cannot see video frames.
Do NOT invent visuals. If visuals are not clearly described in the text, set visual="{unknown}".

Return STRICT JSON with this exact shape:

{{
  "mode": "text",
  "transcript_summary": "string",
  "scene_descriptions": [
    {{"t":"0-3","visual":"{unknown} or text-supported","dialogue":"string or {none}"}}
  ],
  "key_lines": ["string"],
  "candidate_hooks": ["string"],
  "candidate_pains": ["string"],
  "candidate_shows": ["string"],
  "ctas": ["string"]
}}

Requirements:
{requirements}
- If there is no dialogue, use "{none}" (do not hallucinate lines).

TEXT TO ANALYZE:
"""{source_text}"""'''


def _requirement_lines() -> str:
    lines = []
    for field, (low, high, qualifier) in FIELD_CARDINALITY.items():
        line = f"- {field}: {low}–{high} "
        if field == "scene_descriptions":
            line += 'segments, with time ranges like "0-3", "3-8", "8-15", etc.'
        else:
            line += f"items{qualifier}"
        lines.append(line)
    return "\n".join(lines)


def build_analysis_prompt(source_text: str) -> str:
    """
    Build the single instruction string for one request.

    Pure: no I/O, no caching. The source text is embedded verbatim.
    """
    return AD_SUMMARY_TEMPLATE.format(
        unknown=UNKNOWN_VISUAL,
        none=NO_DIALOGUE,
        requirements=_requirement_lines(),
        source_text=source_text,
    ).strip()


__all__ = [
    "UNKNOWN_VISUAL",
    "NO_DIALOGUE",
    "FIELD_CARDINALITY",
    "RESULT_ARRAY_FIELDS",
    "AD_SUMMARY_TEMPLATE",
    "build_analysis_prompt",
]
