"""Starter .pathfilter.toml template."""

DEFAULT_TOML = """\
# pathfilter configuration
version = "1.0"

[filters]
filters = ".github/filters.yml"   # path to the filters YAML, or inline YAML
predicate_quantifier = "some"     # some | every: how clauses of one filter combine

[git]
base = ""                         # branch, tag or sha to compare with; empty = last commit
head = "HEAD"

[output]
format = "terminal"               # terminal | json | outputs
list_files = "none"               # none | csv | json | shell | escape
"""

SAMPLE_FILTERS = """\
# Each key is a filter; values are globs, lists of globs, or
# status-qualified globs such as `added|modified: "src/**"`.
shared: &shared
  - ".github/**"
  - "pyproject.toml"
src:
  - *shared
  - "src/**"
docs:
  - "**/*.md"
"""
