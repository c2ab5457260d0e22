"""Sphinx configuration for the shipdesk API reference."""

project = "shipdesk"
release = "0.1.0"
version = ".".join(release.split(".")[:2])

extensions = [
    "myst_parser",
    "autodoc2",
    "sphinx.ext.intersphinx",
]

# Route modules only wire services to FastAPI; the services carry the docs.
autodoc2_packages = [
    {
        "path": "../src/shipdesk",
        "module": "shipdesk",
        "exclude_dirs": ["routes"],
    },
]
autodoc2_render_plugin = "myst"
autodoc2_hidden_objects = ["private", "inherited"]

myst_enable_extensions = ["colon_fence"]

exclude_patterns = ["_build"]

html_theme = "furo"
html_title = f"shipdesk {release}"

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "fastapi": ("https://fastapi.tiangolo.com", None),
    "pydantic": ("https://docs.pydantic.dev/latest", None),
    "sqlalchemy": ("https://docs.sqlalchemy.org/en/20", None),
    "httpx": ("https://www.python-httpx.org", None),
}
