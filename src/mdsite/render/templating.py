from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jinja2 import DictLoader, Environment, StrictUndefined

BASE_TEMPLATE = """
<!doctype html>
<html>
  <head>
    <meta charset="utf-8">
    <title>{{ title }}</title>
  </head>
  <body>
    <div class="mdsite">
      {% block content %}{% endblock %}
    </div>
  </body>
</html>
""".strip()

PAGE_TEMPLATE = """
{% extends "base.html" %}
{% block content %}
      <article class="mdsite-content">
{{ body|safe }}
      </article>
      <nav class="mdsite-nav">
        {%- if links_to %}
        <h2>Links to</h2>
        <ul class="mdsite-links-to">
          {%- for item in links_to %}
          <li><a href="{{ item.href }}">{{ item.title }}</a></li>
          {%- endfor %}
        </ul>
        {%- endif %}
        {%- if linked_from %}
        <h2>Linked from</h2>
        <ul class="mdsite-linked-from">
          {%- for item in linked_from %}
          <li><a href="{{ item.href }}">{{ item.title }}</a></li>
          {%- endfor %}
        </ul>
        {%- endif %}
      </nav>
{% endblock %}
""".strip()


@dataclass(frozen=True)
class Templates:
    env: Environment

    def render_page(self, context: dict[str, Any]) -> str:
        tpl = self.env.get_template("page.html")
        return str(tpl.render(**context))


def create_environment() -> Templates:
    loader = DictLoader({"base.html": BASE_TEMPLATE, "page.html": PAGE_TEMPLATE})
    env = Environment(
        loader=loader,
        undefined=StrictUndefined,
        autoescape=True,
        keep_trailing_newline=True,
    )
    return Templates(env=env)
