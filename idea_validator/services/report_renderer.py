# idea_validator/services/report_renderer.py
from idea_validator.models.idea_models import ProductIdeaRecord
from idea_validator.models.validation_report import RiskItem
from idea_validator.services.presentation import (
    composite_risk_tier,
    priority_tier,
    recommendation_tier,
    score_tier,
    severity_tier,
)

_RECOMMENDATION_LABELS = {
    "proceed": "Proceed",
    "proceed-with-caution": "Proceed with caution",
    "pivot-needed": "Pivot needed",
    "stop": "Stop",
}


def _bullets(items: list[str]) -> list[str]:
    return [f"- {item}" for item in items] or ["- _None listed_"]


def _numbered(items: list[str]) -> list[str]:
    return [f"{index}. {item}" for index, item in enumerate(items, start=1)]


def _risk_lines(title: str, risks: list[RiskItem]) -> list[str]:
    lines = [f"### {title}", ""]
    for item in risks:
        level = composite_risk_tier(item.probability, item.impact)
        lines.append(f"- **{item.risk}** ({level.value} Risk `{level.tier.value}`)")
        lines.append(f"  - Probability: {item.probability}, Impact: {item.impact}")
        lines.append(f"  - Mitigation: {item.mitigation}")
    if not risks:
        lines.append("- _None identified_")
    lines.append("")
    return lines


def render_markdown(record: ProductIdeaRecord) -> str:
    """Renders a stored validation as a Markdown document with display tiers attached."""
    report = record.validation
    lines = [f"# {record.title}", "", record.description, ""]
    if record.target_market:
        lines += [f"**Target Market:** {record.target_market}", ""]

    lines += [
        "## Overall Assessment",
        "",
        f"- **Viability Score:** {report.viability_score:g}/10 `{score_tier(report.viability_score).value}`",
        f"- **Recommendation:** {_RECOMMENDATION_LABELS[report.recommendation]} "
        f"`{recommendation_tier(report.recommendation).value}`",
        "",
        report.reasoning,
        "",
    ]

    users = report.user_analysis
    lines += ["## User Analysis", "", "### Target Users", ""] + _bullets(users.target_users) + [""]
    lines += ["### User Personas", ""]
    for persona in users.user_personas:
        lines += [
            f"- **{persona.name}** ({persona.demographics})",
            f"  - Pain points: {'; '.join(persona.pain_points)}",
            f"  - Goals: {'; '.join(persona.goals)}",
        ]
    lines += ["", "### User Journey", ""] + _numbered(users.user_journey) + [""]

    pains = report.pain_points
    lines += ["## Pain Points", ""]
    for problem in pains.primary_problems:
        lines.append(
            f"- **{problem.problem}** severity: {problem.severity} `{severity_tier(problem.severity).value}`, "
            f"frequency: {problem.frequency} `{severity_tier(problem.frequency).value}`"
        )
        if problem.current_solutions:
            lines.append(f"  - Current solutions: {'; '.join(problem.current_solutions)}")
    lines += ["", f"**Market Gap:** {pains.market_gap}", ""]

    features = report.features
    lines += ["## Features", ""]
    for feature in features.core_features:
        lines.append(
            f"- **{feature.name}** priority: {feature.priority} `{priority_tier(feature.priority).value}`, "
            f"complexity: {feature.complexity} `{severity_tier(feature.complexity).value}`"
        )
        lines.append(f"  - {feature.description}")
        lines.append(f"  - User value: {feature.user_value}")
    lines += ["", "### MVP Features", ""] + _bullets(features.mvp_features)
    lines += ["", "### Future Features", ""] + _bullets(features.future_features) + [""]

    lines += ["## Risk Analysis", ""]
    lines += _risk_lines("Technical Risks", report.risks.technical_risks)
    lines += _risk_lines("Market Risks", report.risks.market_risks)
    lines += _risk_lines("Business Risks", report.risks.business_risks)

    metrics = report.metrics
    lines += ["## Success Metrics", ""]
    for metric in metrics.success_metrics:
        lines.append(f"- **{metric.metric}**: {metric.target} within {metric.timeframe} (measured by {metric.measurement})")
    lines += ["", "### Key Performance Indicators", ""] + _bullets(metrics.kpis)
    lines += ["", "### Validation Metrics", ""] + _bullets(metrics.validation_metrics) + [""]

    market = report.market_analysis
    lines += [
        "## Market Analysis",
        "",
        f"- **TAM (Total Addressable Market):** {market.market_size.tam}",
        f"- **SAM (Serviceable Addressable Market):** {market.market_size.sam}",
        f"- **SOM (Serviceable Obtainable Market):** {market.market_size.som}",
        "",
        "### Competitive Analysis",
        "",
    ]
    for competitor in market.competition:
        lines += [
            f"- **{competitor.competitor}**",
            f"  - Strengths: {'; '.join(competitor.strengths)}",
            f"  - Weaknesses: {'; '.join(competitor.weaknesses)}",
            f"  - Our differentiation: {competitor.differentiation}",
        ]
    lines += ["", "### Validation Steps", ""] + _numbered(market.validation_steps) + [""]

    lines += ["## Recommended Next Steps", ""]
    for index, step in enumerate(report.next_steps, start=1):
        lines.append(f"{index}. **{step.step}** ({step.priority} priority `{priority_tier(step.priority).value}`)")
        lines.append(f"   - Timeframe: {step.timeframe}")
        lines.append(f"   - Resources: {step.resources}")

    return "\n".join(lines).rstrip() + "\n"
