"""
Scoring: raw answers and legacy results → canonical ``ScoreSet``.

Modules
-------
normalizer : normalize() + reconcile(): ordered shape probes over legacy
             result formats; overall_from_dimensions() weighted mean.
calculator : score() + calculate_activity_scores() + is_applicable():
             weighted per-dimension and overall scores from answers.
insights   : readiness_category(), industry_comparison(), build_insights().
"""
