"""Static HTML report — renders a stored Report to a self-contained page."""

from __future__ import annotations

from jinja2 import Environment

from brandlens.schemas.entities import Report
from brandlens.schemas.report import ReportData

_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Brand Analysis: {{ data.url }}</title>
<style>
body { font-family: system-ui, sans-serif; max-width: 960px; margin: 2rem auto; color: #222; }
.score { display: inline-block; padding: 0.2rem 0.6rem; border-radius: 4px; }
.high { background: #d4f7dc; } .medium { background: #fff3c4; } .low { background: #fbd5d5; }
table { border-collapse: collapse; } td, th { border: 1px solid #ccc; padding: 0.3rem 0.6rem; }
</style>
</head>
<body>
<h1>Brand Analysis: {{ data.url }}</h1>
<p><em>Generated {{ data.generated_at.strftime("%Y-%m-%d %H:%M") }} UTC{% if version > 1 %} (version {{ version }}){% endif %}</em></p>

<h2>Executive Summary</h2>
<p>{{ data.executive_summary.overview }}</p>
{% if data.executive_summary.top_actions %}
<ol>
{% for rec in data.executive_summary.top_actions %}  <li><strong>{{ rec.title }}</strong> ({{ rec.impact }} impact)</li>
{% endfor %}</ol>
{% endif %}

<h2>Model Consensus</h2>
<p>Agreement index: <strong>{{ data.consensus.agreement_index }}/100</strong></p>
{% if data.consensus.common_themes %}<p>Common themes: {{ data.consensus.common_themes | join(", ") }}</p>{% endif %}
{% for div in data.consensus.divergences %}
<h3>{{ div.topic }}</h3>
<p>{{ div.explanation }}</p>
<ul>{% for view in div.model_perspectives %}<li><strong>{{ view.provider.value }}</strong>: {{ view.view }}</li>{% endfor %}</ul>
{% endfor %}

<h2>Messaging Quality</h2>
<table>
<tr><th>Dimension</th><th>Score</th><th>Rationale</th></tr>
{% for name, score in scores %}<tr><td>{{ name | title }}</td><td><span class="score {{ score.level }}">{{ score.score }}</span></td><td>{{ score.rationale }}</td></tr>
{% endfor %}</table>

<h2>Competitive Positioning</h2>
<p>{{ data.positioning.axes.x.label }} ({{ data.positioning.axes.x.min }} to {{ data.positioning.axes.x.max }}),
{{ data.positioning.axes.y.label }} ({{ data.positioning.axes.y.min }} to {{ data.positioning.axes.y.max }})</p>
<table>
<tr><th>Name</th><th>X</th><th>Y</th></tr>
<tr><td><strong>{{ data.positioning.subject.name }}</strong></td><td>{{ data.positioning.subject.positioning.x }}</td><td>{{ data.positioning.subject.positioning.y }}</td></tr>
{% for comp in data.positioning.competitors %}<tr><td>{{ comp.name }}</td><td>{{ comp.positioning.x }}</td><td>{{ comp.positioning.y }}</td></tr>
{% endfor %}</table>

{% if data.recommendations %}
<h2>Recommendations</h2>
{% for rec in data.recommendations %}
<h3>{{ loop.index }}. {{ rec.title }} <span class="score {{ rec.impact }}">{{ rec.impact }}</span></h3>
<p>{{ rec.description }}</p>
{% endfor %}
{% endif %}

{% if data.human_vs_llm %}
<h2>Your Statement vs. the Models</h2>
<p><strong>Your statement:</strong> {{ data.human_vs_llm.human_statement }}</p>
<p><strong>Model consensus:</strong> {{ data.human_vs_llm.llm_consensus }}</p>
{% if data.human_vs_llm.gaps %}<p>Missing from your statement: {{ data.human_vs_llm.gaps | join(", ") }}</p>{% endif %}
{% endif %}

<hr>
<p><small>{{ data.metadata.pages_analyzed }} page(s) analyzed, {{ data.metadata.tokens_used }} tokens, ${{ "%.4f" | format(data.metadata.cost) }}</small></p>
</body>
</html>
"""


def render_html_report(report: Report) -> str:
    """Render a stored Report into a self-contained HTML page."""
    env = Environment(autoescape=True)
    template = env.from_string(_TEMPLATE)
    data = ReportData.model_validate(report.data)
    scores = [(name, getattr(data.messaging, name)) for name in ("clarity", "specificity", "differentiation", "trust")]
    return template.render(data=data, scores=scores, version=report.version)
