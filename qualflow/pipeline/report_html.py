from __future__ import annotations
from typing import Dict, Any, Optional, Sequence
from jinja2 import Template
from ..models.schemas import GroundedTheoryResult, Pattern, Theme
from ..utils.file_io import write_text

HTML = """
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8"/>
<title>QualFlow Report</title>
<script src="https://cdn.jsdelivr.net/npm/mermaid/dist/mermaid.min.js"></script>
<script>mermaid.initialize({ startOnLoad: true });</script>
<style>
body { font-family: -apple-system, BlinkMacSystemFont, Segoe UI, Roboto, Helvetica, Arial, sans-serif; padding: 24px; }
table { border-collapse: collapse; width: 100%; margin: 12px 0; }
th, td { border: 1px solid #ddd; padding: 8px; }
th { background: #f7f7f7; }
pre { background: #f9f9f9; padding: 12px; overflow: auto; white-space: pre-wrap; }
.badge { display: inline-block; padding: 2px 8px; border-radius: 12px; background: #eef; margin-right: 6px; }
</style>
</head>
<body>
<h1>QualFlow Grounded Theory Report</h1>
<h2>Stats</h2>
<ul>
{% for k,v in stats.items() %}
<li><b>{{k}}</b>: {{v}}</li>
{% endfor %}
</ul>

<h2>Core Category: {{ theory.core_category.name }}</h2>
<p><span class="badge">centrality {{ "%.2f"|format(theory.core_category.centrality) }}</span>
<span class="badge">completeness {{ "%.2f"|format(theory.completeness) }}</span></p>

<h2>Relationships (Mermaid)</h2>
<div class="mermaid">
flowchart LR
  core["{{ theory.core_category.name | replace('"', "'") }}"]
{% for r in theory.core_category.relationships %}
  {% if r.relationship_type == "causes" %}
  R{{ loop.index }}["{{ r.related_category | replace('"', "'") }}"] -->|causes| core
  {% else %}
  core -->|{{ r.relationship_type }}| R{{ loop.index }}["{{ r.related_category | replace('"', "'") }}"]
  {% endif %}
{% endfor %}
</div>

<h2>Categories</h2>
<table>
<tr><th>category</th><th>codes</th><th>properties</th><th>related</th></tr>
{% for c in theory.supporting_categories %}
<tr><td>{{c.name}}</td><td>{{ c.related_codes | join(', ') }}</td><td>{{ c.properties | join(', ') }}</td><td>{{ c.related_categories | join(', ') }}</td></tr>
{% endfor %}
</table>

{% if themes %}
<h2>Themes</h2>
<table>
<tr><th>theme</th><th>prevalence</th><th>codes</th></tr>
{% for t in themes %}
<tr><td>{{t.name}}</td><td>{{ "%.2f"|format(t.prevalence) }}</td><td>{{ t.supporting_codes | join(', ') }}</td></tr>
{% endfor %}
</table>
{% endif %}

{% if patterns %}
<h2>Patterns</h2>
<table>
<tr><th>type</th><th>significance</th><th>description</th></tr>
{% for p in patterns %}
<tr><td>{{p.type}}</td><td>{{p.significance}}</td><td>{{p.description}}</td></tr>
{% endfor %}
</table>
{% endif %}

<h2>Theoretical Framework</h2>
<pre>{{ theory.theoretical_framework }}</pre>

<h2>Storyline</h2>
<pre>{{ theory.storyline }}</pre>

<h2>Theoretical Memo</h2>
<pre>{{ theory.core_category.theoretical_memo }}</pre>

<h2>Recommendations</h2>
<ol>
{% for r in theory.recommendations %}
<li>{{ r }}</li>
{% endfor %}
</ol>

</body>
</html>
"""

def emit_html(out_path: str, stats: Dict[str, Any], theory: GroundedTheoryResult, themes: Optional[Sequence[Theme]] = None, patterns: Optional[Sequence[Pattern]] = None):
    html = Template(HTML, autoescape=True).render(
        stats=stats, theory=theory, themes=list(themes or []), patterns=list(patterns or [])
    )
    write_text(out_path, html)
