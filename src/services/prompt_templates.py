"""
Jinja rendering for LLM prompts
"""

from functools import lru_cache

from jinja2 import BaseLoader, Environment, StrictUndefined, Template

_env = Environment(loader=BaseLoader(), undefined=StrictUndefined, autoescape=False)


@lru_cache(maxsize=32)
def _compile(source: str) -> Template:
    return _env.from_string(source)


def render_prompt(source: str, **variables) -> str:
    """Render a prompt template; a missing variable raises jinja2.UndefinedError"""
    return _compile(source).render(**variables)
