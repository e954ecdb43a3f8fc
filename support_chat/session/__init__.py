"""
Session layer:
- bounded context window over stored turns
- build turns + derive titles
- input validation
- conversation orchestration + stats rollups

Submodules are imported directly; the graph package depends on this one.
"""
