"""Markdown rendering for canonical specs.

Produces the human-readable requirement document attached to Jira issues and
shown in review, without a model round trip.
"""

from __future__ import annotations

from specpilot.models.canonical import CanonicalEvent, CanonicalSpec


def _cell(value: object) -> str:
    return str(value if value is not None else "").replace("|", "\\|").replace("\n", " ")


def render_event(event: CanonicalEvent) -> str:
    """Render one event with its property, identity and PII tables."""
    lines: list[str] = []
    lines.append(f"### {event.name}")
    lines.append(f"**Trigger:** {event.trigger or 'N/A'}")
    lines.append("")
    lines.append(f"**Description:** {event.description or 'N/A'}")
    lines.append("")

    lines.append("**Properties**")
    lines.append("| Property | Type | Required | Description |")
    lines.append("|----------|------|----------|-------------|")
    for prop in event.properties:
        required = "true" if prop.required else "false"
        lines.append(
            f"| {_cell(prop.name)} | {_cell(prop.type or 'string')} | {required} | {_cell(prop.description)} |"
        )
    lines.append("")

    identity = event.identity_or_empty
    lines.append("**Identity**")
    lines.append("| Role | Identifier | Notes |")
    lines.append("|------|------------|-------|")
    lines.append(
        f"| Primary | {_cell(identity.primary or 'N/A')} | "
        f"{_cell(identity.stitching_assumptions or 'Primary user identifier')} |"
    )
    lines.append(
        f"| Secondary | {_cell(', '.join(identity.secondary) or 'N/A')} | Supplementary identifiers |"
    )
    lines.append("")

    lines.append("**PII & Consent**")
    lines.append("| Field | PII Level | Consent Required |")
    lines.append("|-------|-----------|------------------|")
    for prop in event.properties:
        consent = "Yes" if prop.consent.required else "No"
        lines.append(f"| {_cell(prop.name)} | {prop.pii_level} | {consent} |")
    lines.append("")

    return "\n".join(lines)


def render_spec_markdown(canonical: CanonicalSpec | dict) -> str:
    """Render a full canonical spec as a Markdown requirement document."""
    spec = CanonicalSpec.coerce(canonical)
    lines: list[str] = []
    lines.append(f"# {spec.metadata.title or 'Untitled Spec'}")
    lines.append("")
    lines.append("## Summary")
    lines.append(spec.metadata.summary or "_No summary provided_")
    lines.append("")
    lines.append("---")
    lines.append("")

    lines.append("## Events")
    lines.append("")
    if not spec.events:
        lines.append("No events defined.")
        lines.append("")
    for event in spec.events:
        lines.append(render_event(event))

    business_rules = [rule for event in spec.events for rule in event.business_rules]
    technical_rules = [rule for event in spec.events for rule in event.technical_rules]

    lines.append("---")
    lines.append("")
    for heading, rules in (("Business Rules", business_rules), ("Technical Rules", technical_rules)):
        lines.append(f"## {heading}")
        if rules:
            lines.extend(f"- {rule}" for rule in rules)
        else:
            lines.append("- None")
        lines.append("")
    lines.append("---")
    lines.append("")

    lines.append("## Destinations")
    lines.append("| Destination | Requirements |")
    lines.append("|-------------|--------------|")
    for dest in spec.destinations:
        lines.append(f"| {_cell(dest.name)} | {_cell(', '.join(dest.requirements))} |")
    lines.append("")

    lines.append("## Acceptance Criteria")
    for criterion in spec.acceptance_criteria:
        lines.append(f"- [ ] {criterion}")
    lines.append("")
    lines.append("---")
    lines.append("")

    lines.append("## Open Questions")
    if spec.open_questions:
        lines.extend(f"{i}. {q}" for i, q in enumerate(spec.open_questions, start=1))
    else:
        lines.append("None.")
    lines.append("")

    return "\n".join(lines)
