"""
Recommendation engine: turns a ``ScoreSet`` and respondent context into
ranked, grouped recommendations.

Modules
-------
selector    : select(): union of the core, activity, industry and
              agency-type pools, de-duplicated by template id.
prioritizer : prioritize(): deterministic ranking by priority, score gap,
              pool precedence and insertion order; non-exclusive groupings.
"""
